"""Domain models - pure Python dataclasses representing lending entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class Category(str, Enum):
    """Canonical lifecycle bucket an application's raw status normalizes into"""

    CONFIRMED = "CONFIRMED"
    FINISHED = "FINISHED"
    REJECTED = "REJECTED"
    LIMIT = "LIMIT"
    PENDING = "PENDING"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True)
class Product:
    name: str
    price: int
    count: Optional[int] = 1


@dataclass(frozen=True)
class Payment:
    """Money actually received against an application"""

    amount: int
    occurred_at: datetime
    status: Optional[str] = "COMPLETED"  # COMPLETED | PENDING | FAILED


@dataclass(frozen=True)
class Application:
    """Loan application (zayavka) as supplied by the backend"""

    id: int
    raw_status: Optional[str]
    amount: Optional[int]
    created_at: datetime
    payment_amount: Optional[int] = None
    percent: Optional[float] = None
    term_months: Optional[int] = None
    fillial_id: Optional[int] = None
    paid: Optional[bool] = None
    payment_method: Optional[str] = None
    fullname: str = ""
    phone: Optional[str] = None
    passport: Optional[str] = None
    products: List[Product] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)

    @property
    def repayment_total(self) -> int:
        """Amount to be repaid; falls back to the principal when unset"""
        if self.payment_amount is not None:
            return self.payment_amount
        return self.amount or 0


@dataclass(frozen=True)
class Merchant:
    id: int
    name: str


@dataclass(frozen=True)
class Fillial:
    """Merchant branch"""

    id: int
    name: str
    region: Optional[str] = None
    merchant_id: Optional[int] = None


@dataclass(frozen=True)
class Agent:
    """Field agent; authority derives from the fillials it is a member of"""

    id: int
    name: str
    fillial_ids: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class DirectoryContext:
    """Read-only id-keyed lookups used to resolve hierarchical filter facets"""

    fillials: Dict[int, Fillial] = field(default_factory=dict)
    merchants: Dict[int, Merchant] = field(default_factory=dict)
    agents: Dict[int, Agent] = field(default_factory=dict)

    @classmethod
    def from_lists(
        cls,
        fillials: List[Fillial] = (),
        merchants: List[Merchant] = (),
        agents: List[Agent] = (),
    ) -> "DirectoryContext":
        return cls(
            fillials={f.id: f for f in fillials},
            merchants={m.id: m for m in merchants},
            agents={a.id: a for a in agents},
        )

    def merchant_id_for(self, fillial_id: Optional[int]) -> Optional[int]:
        fillial = self.fillials.get(fillial_id)
        return fillial.merchant_id if fillial else None


@dataclass(frozen=True)
class FilterSpec:
    """Multi-facet application filter; None on any field means no constraint"""

    search: Optional[str] = None
    status: Optional[Category] = None
    paid: Optional[bool] = None
    payment_method: Optional[str] = None
    fillial_id: Optional[int] = None
    region: Optional[str] = None
    merchant_id: Optional[int] = None
    agent_id: Optional[int] = None
    expired_month: Optional[int] = None
    amount_min: Optional[int] = None
    amount_max: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class ScheduleEntry:
    """Single monthly installment obligation"""

    month_number: int
    due_date: date
    expected_amount: int
    paid_amount: int = 0
    status: InstallmentStatus = InstallmentStatus.PENDING
    days_past_due: int = 0


@dataclass
class DebtSummary:
    """Outcome of reconciling payments against a schedule"""

    schedule: List[ScheduleEntry]
    total_amount: int
    paid_amount: int
    remaining_debt: int
    overdue_amount: int
    next_payment_amount: Optional[int]
    next_payment_date: Optional[date]
    monthly_payment: int
    total_months: int
    completed_months: int
    remaining_months: int
    unallocated_amount: int = 0


@dataclass
class EntityCount:
    id: int
    label: str
    value: int


@dataclass
class StatusDistribution:
    labels: List[str]
    series: List[int]


@dataclass
class TimeSeries:
    categories: List[str]
    series: List[int]


@dataclass
class ApplicationStats:
    """Headline figures shown above the applications table"""

    total_count: int
    approved_amount: int
    approved_paid_amount: int
    approved_unpaid_amount: int
    product_count: int


@dataclass
class EntityDebt:
    """Debt rolled up to one merchant or fillial"""

    id: int
    label: str
    application_count: int
    total_amount: int
    remaining_debt: int
    overdue_amount: int
