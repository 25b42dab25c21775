"""Pydantic schemas for API response validation"""

from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional
from loan_ops.domain.models import Category, InstallmentStatus


class ClassificationResponse(BaseModel):
    """Response for GET /v1/status/classify"""

    raw_status: Optional[str]
    category: Category
    rule: str


class ApplicationStatsSchema(BaseModel):
    total_count: int
    approved_amount: int
    approved_paid_amount: int
    approved_unpaid_amount: int
    product_count: int


class ApplicationItem(BaseModel):
    """Single application row in a filtered listing"""

    id: int
    raw_status: Optional[str]
    category: Category
    amount: Optional[int]
    term_months: Optional[int]
    fillial_id: Optional[int]
    paid: Optional[bool]
    created_at: datetime


class ApplicationListResponse(BaseModel):
    """Response for GET /v1/applications"""

    total: int
    matched: int
    stats: ApplicationStatsSchema
    items: List[ApplicationItem]


class ScheduleEntrySchema(BaseModel):
    """Single installment with its reconciled status"""

    month_number: int
    due_date: date
    expected_amount: int
    paid_amount: int
    status: InstallmentStatus
    days_past_due: int


class DebtResponse(BaseModel):
    """Response for GET /v1/applications/{id}/debt"""

    application_id: int
    as_of: date
    total_amount: int
    paid_amount: int
    remaining_debt: int
    overdue_amount: int
    next_payment_amount: Optional[int] = None
    next_payment_date: Optional[date] = None
    monthly_payment: int
    total_months: int
    completed_months: int
    remaining_months: int
    unallocated_amount: int
    schedule: List[ScheduleEntrySchema]


class EntityCountSchema(BaseModel):
    id: int
    label: str
    value: int


class StatusDistributionResponse(BaseModel):
    labels: List[str]
    series: List[int]


class TimeSeriesResponse(BaseModel):
    categories: List[str]
    series: List[int]


class EntityDebtSchema(BaseModel):
    """Debt rolled up to one merchant or fillial"""

    id: int
    label: str
    application_count: int
    total_amount: int
    remaining_debt: int
    overdue_amount: int


class DebtRollupResponse(BaseModel):
    """Response for GET /v1/debts"""

    dimension: str
    as_of: date
    items: List[EntityDebtSchema]
