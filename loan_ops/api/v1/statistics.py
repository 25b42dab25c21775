"""GET /v1/statistics/* - chart series over filtered applications"""

import time
from dataclasses import asdict
from typing import List, Literal
from fastapi import APIRouter, Depends, Query, Request

from loan_ops.api.v1.schemas import EntityCountSchema, StatusDistributionResponse, TimeSeriesResponse
from loan_ops.api.dependencies import FilteredApplications, get_filtered_applications, get_request_id
from loan_ops.domain.aggregation import by_entity, over_time, status_distribution
from loan_ops.infrastructure.observability.metrics import record_query
from loan_ops.infrastructure.observability.logging import log_query

router = APIRouter()


def _observe(request: Request, kind: str, filtered: FilteredApplications, start_time: float) -> None:
    record_query(kind, filtered.applications)
    log_query(
        get_request_id(request),
        kind,
        len(filtered.applications),
        filtered.total,
        (time.time() - start_time) * 1000,
    )


@router.get("/statistics/by-entity", response_model=List[EntityCountSchema])
def applications_by_entity(
    request: Request,
    dimension: Literal["fillial", "merchant"] = Query("fillial"),
    filtered: FilteredApplications = Depends(get_filtered_applications),
):
    """Application counts per fillial or merchant, largest first"""
    start_time = time.time()
    result = by_entity(filtered.applications, dimension, filtered.directory)
    _observe(request, "by_entity", filtered, start_time)
    return [EntityCountSchema(**asdict(e)) for e in result]


@router.get("/statistics/status-distribution", response_model=StatusDistributionResponse)
def applications_status_distribution(
    request: Request,
    filtered: FilteredApplications = Depends(get_filtered_applications),
):
    """Counts per literal status value, for the pie chart"""
    start_time = time.time()
    result = status_distribution(filtered.applications)
    _observe(request, "status_distribution", filtered, start_time)
    return StatusDistributionResponse(**asdict(result))


@router.get("/statistics/over-time", response_model=TimeSeriesResponse)
def applications_over_time(
    request: Request,
    granularity: Literal["day", "week"] = Query("day"),
    filtered: FilteredApplications = Depends(get_filtered_applications),
):
    """Applications created per day or per week"""
    start_time = time.time()
    result = over_time(filtered.applications, granularity)
    _observe(request, "over_time", filtered, start_time)
    return TimeSeriesResponse(**asdict(result))
