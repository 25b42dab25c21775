"""Allocate received payments against an installment schedule"""

from dataclasses import replace
from datetime import date
from typing import Iterable, List, Sequence
from loan_ops.domain.models import Application, DebtSummary, InstallmentStatus, Payment, ScheduleEntry
from loan_ops.domain.exceptions import InvalidAmountError
from loan_ops.domain.installments import schedule_for_application
from loan_ops.utils.date_utils import as_date, as_utc

DEFAULT_COUNTED_STATUSES = ("COMPLETED",)


def counted_payments(
    payments: Iterable[Payment],
    counted_statuses: Sequence[str] = DEFAULT_COUNTED_STATUSES,
) -> List[Payment]:
    """Settled payments in occurrence order; pending/failed ones never reduce debt"""
    accepted = {s.upper() for s in counted_statuses}
    settled = []
    for payment in payments:
        if payment.amount < 0:
            raise InvalidAmountError(f"Payment amount must not be negative: {payment.amount}")
        if payment.status is None or payment.status.upper() in accepted:
            settled.append(payment)

    # sorted() is stable, so same-instant payments keep their given order.
    # Naive timestamps are read as UTC so they order against aware ones.
    return sorted(settled, key=lambda p: as_utc(p.occurred_at))


def allocate(entries: List[ScheduleEntry], payments: List[Payment]) -> int:
    """
    FIFO allocation: each payment fills the earliest entry with an outstanding
    balance, then spills into the next. Mutates paid_amount on entries.

    Returns the amount left over once every entry is covered.
    """
    position = 0
    overflow = 0
    for payment in payments:
        available = payment.amount
        while available > 0 and position < len(entries):
            entry = entries[position]
            outstanding = entry.expected_amount - entry.paid_amount
            applied = min(outstanding, available)
            entry.paid_amount += applied
            available -= applied
            if entry.paid_amount >= entry.expected_amount:
                position += 1
        overflow += available
    return overflow


def reconcile(
    schedule: Sequence[ScheduleEntry],
    payments: Iterable[Payment],
    as_of: date,
    counted_statuses: Sequence[str] = DEFAULT_COUNTED_STATUSES,
) -> DebtSummary:
    """
    Classify each installment and compute debt figures as of a given day.

    Entry status after allocation:
    - COMPLETED: paid_amount covers expected_amount
    - OVERDUE:   due_date is before as_of; days_past_due counts whole days
    - PENDING:   otherwise

    The input schedule is not modified; a fresh copy carries the statuses.
    as_of is always supplied by the caller, never read from the clock.
    """
    today = as_date(as_of)
    entries = [
        replace(e, paid_amount=0, status=InstallmentStatus.PENDING, days_past_due=0)
        for e in sorted(schedule, key=lambda e: e.month_number)
    ]

    overflow = allocate(entries, counted_payments(payments, counted_statuses))

    for entry in entries:
        if entry.paid_amount >= entry.expected_amount:
            entry.status = InstallmentStatus.COMPLETED
        elif entry.due_date < today:
            entry.status = InstallmentStatus.OVERDUE
            entry.days_past_due = (today - entry.due_date).days
        else:
            entry.status = InstallmentStatus.PENDING

    total_amount = sum(e.expected_amount for e in entries)
    paid_amount = sum(min(e.paid_amount, e.expected_amount) for e in entries)
    overdue_amount = sum(
        e.expected_amount - e.paid_amount
        for e in entries
        if e.status == InstallmentStatus.OVERDUE
    )

    # Overdue entries precede pending ones because due dates ascend
    upcoming = next((e for e in entries if e.status != InstallmentStatus.COMPLETED), None)
    completed_months = sum(1 for e in entries if e.status == InstallmentStatus.COMPLETED)

    return DebtSummary(
        schedule=entries,
        total_amount=total_amount,
        paid_amount=paid_amount,
        remaining_debt=max(total_amount - paid_amount, 0),
        overdue_amount=overdue_amount,
        next_payment_amount=upcoming.expected_amount - upcoming.paid_amount if upcoming else None,
        next_payment_date=upcoming.due_date if upcoming else None,
        monthly_payment=entries[0].expected_amount if entries else 0,
        total_months=len(entries),
        completed_months=completed_months,
        remaining_months=len(entries) - completed_months,
        unallocated_amount=overflow,
    )


def debt_summary_for(
    app: Application,
    as_of: date,
    counted_statuses: Sequence[str] = DEFAULT_COUNTED_STATUSES,
) -> DebtSummary:
    """Schedule an application's loan and reconcile its own payments"""
    return reconcile(schedule_for_application(app), app.payments, as_of, counted_statuses)
