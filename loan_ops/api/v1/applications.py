"""GET /v1/applications - filtered listing, and per-application debt"""

import time
from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from loan_ops.api.v1.schemas import (
    ApplicationItem,
    ApplicationListResponse,
    ApplicationStatsSchema,
    DebtResponse,
)
from loan_ops.api.dependencies import (
    FilteredApplications,
    get_filtered_applications,
    get_repository,
    get_request_id,
)
from loan_ops.config import settings
from loan_ops.domain.aggregation import application_stats
from loan_ops.domain.reconciliation import debt_summary_for
from loan_ops.domain.status import classify
from loan_ops.infrastructure.repository import ApplicationRepository, get_application
from loan_ops.infrastructure.observability.metrics import record_query, record_reconciliation
from loan_ops.infrastructure.observability.logging import log_query

router = APIRouter()


@router.get("/applications", response_model=ApplicationListResponse)
def list_applications(
    request: Request,
    filtered: FilteredApplications = Depends(get_filtered_applications),
):
    """
    Applications matching every supplied facet, plus header totals.

    Approved amounts count CONFIRMED and FINISHED applications only.
    """
    start_time = time.time()
    apps = filtered.applications

    response = ApplicationListResponse(
        total=filtered.total,
        matched=len(apps),
        stats=ApplicationStatsSchema(**asdict(application_stats(apps))),
        items=[
            ApplicationItem(
                id=a.id,
                raw_status=a.raw_status,
                category=classify(a.raw_status),
                amount=a.amount,
                term_months=a.term_months,
                fillial_id=a.fillial_id,
                paid=a.paid,
                created_at=a.created_at,
            )
            for a in apps
        ],
    )

    record_query("applications", apps)
    log_query(get_request_id(request), "applications", len(apps), filtered.total, (time.time() - start_time) * 1000)
    return response


@router.get("/applications/{application_id}/debt", response_model=DebtResponse)
async def get_application_debt(
    application_id: int,
    request: Request,
    as_of: Optional[date] = Query(None, description="Reconciliation day (default: today)"),
    repository: ApplicationRepository = Depends(get_repository),
):
    """
    Repayment schedule reconciled against received payments.

    Returns:
        Per-installment status plus total, paid, remaining and overdue figures
    """
    start_time = time.time()
    as_of = as_of or date.today()

    app = await get_application(repository, application_id)
    summary = debt_summary_for(app, as_of, settings.counted_payment_statuses)

    record_query("debt", [app])
    record_reconciliation(summary)
    log_query(get_request_id(request), "debt", 1, 1, (time.time() - start_time) * 1000)

    return DebtResponse(**asdict(summary), application_id=app.id, as_of=as_of)
