"""Dependency injection for FastAPI endpoints"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from fastapi import Depends, Query, Request
from loan_ops.domain.models import Application, Category, DirectoryContext, FilterSpec
from loan_ops.domain.filters import filter_applications
from loan_ops.infrastructure.clients.backend import BackendClient
from loan_ops.infrastructure.repository import ApplicationRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_repository() -> ApplicationRepository:
    """Provide the backend-backed application repository"""
    return BackendClient()


def get_filter_spec(
    search: Optional[str] = Query(None, description="Substring of full name, phone or passport"),
    status: Optional[Category] = Query(None, description="Canonical status category"),
    paid: Optional[bool] = Query(None, description="Paid flag, applied to finished loans only"),
    payment_method: Optional[str] = Query(None),
    fillial_id: Optional[int] = Query(None),
    region: Optional[str] = Query(None),
    merchant_id: Optional[int] = Query(None),
    agent_id: Optional[int] = Query(None),
    expired_month: Optional[int] = Query(None, description="Loan term in months"),
    amount_min: Optional[int] = Query(None),
    amount_max: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None, description="Inclusive through end of day"),
) -> FilterSpec:
    """Build a FilterSpec from query parameters"""
    return FilterSpec(
        search=search,
        status=status,
        paid=paid,
        payment_method=payment_method,
        fillial_id=fillial_id,
        region=region,
        merchant_id=merchant_id,
        agent_id=agent_id,
        expired_month=expired_month,
        amount_min=amount_min,
        amount_max=amount_max,
        start_date=start_date,
        end_date=end_date,
    )


@dataclass
class FilteredApplications:
    applications: List[Application]
    total: int
    directory: DirectoryContext


async def get_filtered_applications(
    spec: FilterSpec = Depends(get_filter_spec),
    repository: ApplicationRepository = Depends(get_repository),
) -> FilteredApplications:
    """Materialize the application set and apply the compiled filter"""
    applications = await repository.get_applications()
    directory = await repository.get_directory()
    return FilteredApplications(
        applications=filter_applications(applications, spec, directory),
        total=len(applications),
        directory=directory,
    )
