"""Dashboard statistics over an already-filtered application collection"""

from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
from loan_ops.domain.models import (
    Application,
    ApplicationStats,
    DirectoryContext,
    EntityCount,
    EntityDebt,
    StatusDistribution,
    TimeSeries,
)
from loan_ops.domain.exceptions import UnsupportedDimensionError
from loan_ops.domain.filters import application_amount
from loan_ops.domain.reconciliation import DEFAULT_COUNTED_STATUSES, debt_summary_for
from loan_ops.domain.status import is_approved
from loan_ops.utils.date_utils import day_key, week_key

ENTITY_DIMENSIONS = ("fillial", "merchant")
GRANULARITIES = {"day": day_key, "week": week_key}

# Bucket for applications whose fillial/merchant cannot be resolved
UNASSIGNED_ID = -1
UNKNOWN_STATUS = "UNKNOWN"


def _entity_id(app: Application, dimension: str, context: DirectoryContext) -> int:
    if dimension == "fillial":
        entity_id = app.fillial_id
    elif dimension == "merchant":
        entity_id = context.merchant_id_for(app.fillial_id)
    else:
        raise UnsupportedDimensionError(f"Unknown entity dimension: {dimension}")
    return UNASSIGNED_ID if entity_id is None else entity_id


def _default_labels(dimension: str, context: DirectoryContext) -> Dict[int, str]:
    if dimension == "fillial":
        return {f.id: f.name for f in context.fillials.values()}
    return {m.id: m.name for m in context.merchants.values()}


def _label(entity_id: int, labels: Mapping[int, str]) -> str:
    return labels.get(entity_id) or f"#{entity_id}"


def by_entity(
    applications: Iterable[Application],
    dimension: str,
    context: DirectoryContext,
    name_lookup: Optional[Mapping[int, str]] = None,
) -> List[EntityCount]:
    """
    Count applications per fillial or merchant.

    Sorted by count descending, ties by ascending id. Labels come from
    name_lookup (default: names in the directory), falling back to "#<id>".
    """
    if dimension not in ENTITY_DIMENSIONS:
        raise UnsupportedDimensionError(f"Unknown entity dimension: {dimension}")

    labels = name_lookup if name_lookup is not None else _default_labels(dimension, context)
    counts = Counter(_entity_id(app, dimension, context) for app in applications)

    result = [EntityCount(id=i, label=_label(i, labels), value=n) for i, n in counts.items()]
    result.sort(key=lambda e: (-e.value, e.id))
    return result


def status_distribution(applications: Iterable[Application]) -> StatusDistribution:
    """Counts per literal raw status, labels in first-seen order"""
    counts: Dict[str, int] = {}
    for app in applications:
        label = app.raw_status if app.raw_status is not None else UNKNOWN_STATUS
        counts[label] = counts.get(label, 0) + 1

    labels = list(counts)
    return StatusDistribution(labels=labels, series=[counts[label] for label in labels])


def over_time(applications: Iterable[Application], granularity: str = "day") -> TimeSeries:
    """
    Applications created per day ("2024-03-05") or per week ("2024-W10").

    Only non-empty buckets appear; keys sort chronologically.
    """
    try:
        bucket_key = GRANULARITIES[granularity]
    except KeyError:
        raise UnsupportedDimensionError(f"Unknown granularity: {granularity}") from None

    counts = Counter(bucket_key(app.created_at) for app in applications)
    categories = sorted(counts)
    return TimeSeries(categories=categories, series=[counts[c] for c in categories])


def application_stats(applications: Iterable[Application]) -> ApplicationStats:
    """Totals for the applications screen header"""
    items = list(applications)
    amounts = [application_amount(a) for a in items]
    approved = [(a, amount) for a, amount in zip(items, amounts) if is_approved(a.raw_status)]
    approved_amount = sum(amount for _, amount in approved)
    approved_paid = sum(amount for a, amount in approved if a.paid)

    product_count = sum(
        p.count if p.count is not None else 1
        for a in items
        for p in a.products
    )

    return ApplicationStats(
        total_count=len(items),
        approved_amount=approved_amount,
        approved_paid_amount=approved_paid,
        approved_unpaid_amount=approved_amount - approved_paid,
        product_count=product_count,
    )


def debt_by_entity(
    applications: Iterable[Application],
    dimension: str,
    context: DirectoryContext,
    as_of: date,
    counted_statuses: Sequence[str] = DEFAULT_COUNTED_STATUSES,
) -> List[EntityDebt]:
    """
    Roll outstanding debt up to merchants or fillials.

    Only approved (CONFIRMED or FINISHED) applications that still owe money
    contribute. Sorted by remaining debt descending, ties by ascending id.
    """
    if dimension not in ENTITY_DIMENSIONS:
        raise UnsupportedDimensionError(f"Unknown entity dimension: {dimension}")

    labels = _default_labels(dimension, context)
    rollup: Dict[int, EntityDebt] = {}

    for app in applications:
        if not is_approved(app.raw_status):
            continue

        summary = debt_summary_for(app, as_of, counted_statuses)
        if summary.remaining_debt <= 0:
            continue

        entity_id = _entity_id(app, dimension, context)
        bucket = rollup.get(entity_id)
        if bucket is None:
            bucket = EntityDebt(
                id=entity_id,
                label=_label(entity_id, labels),
                application_count=0,
                total_amount=0,
                remaining_debt=0,
                overdue_amount=0,
            )
            rollup[entity_id] = bucket

        bucket.application_count += 1
        bucket.total_amount += summary.total_amount
        bucket.remaining_debt += summary.remaining_debt
        bucket.overdue_amount += summary.overdue_amount

    return sorted(rollup.values(), key=lambda d: (-d.remaining_debt, d.id))
