"""GET /v1/debts - outstanding debt rolled up by merchant or fillial"""

import time
from dataclasses import asdict
from datetime import date
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, Request

from loan_ops.api.v1.schemas import DebtRollupResponse, EntityDebtSchema
from loan_ops.api.dependencies import FilteredApplications, get_filtered_applications, get_request_id
from loan_ops.config import settings
from loan_ops.domain.aggregation import debt_by_entity
from loan_ops.infrastructure.observability.metrics import record_query
from loan_ops.infrastructure.observability.logging import log_query

router = APIRouter()


@router.get("/debts", response_model=DebtRollupResponse)
def get_debts(
    request: Request,
    dimension: Literal["fillial", "merchant"] = Query("merchant"),
    as_of: Optional[date] = Query(None, description="Reconciliation day (default: today)"),
    filtered: FilteredApplications = Depends(get_filtered_applications),
):
    """
    Reconcile every filtered application and sum what is still owed.

    Applications that are fully repaid (or have no schedule) are left out.
    """
    start_time = time.time()
    as_of = as_of or date.today()

    rollup = debt_by_entity(
        filtered.applications,
        dimension,
        filtered.directory,
        as_of,
        settings.counted_payment_statuses,
    )

    record_query("debts", filtered.applications)
    log_query(
        get_request_id(request),
        "debts",
        len(filtered.applications),
        filtered.total,
        (time.time() - start_time) * 1000,
    )

    return DebtRollupResponse(
        dimension=dimension,
        as_of=as_of,
        items=[EntityDebtSchema(**asdict(d)) for d in rollup],
    )
