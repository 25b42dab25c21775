"""Monthly installment schedule generation for loan repayment"""

from datetime import date
from typing import List, Optional
from loan_ops.domain.models import Application, ScheduleEntry
from loan_ops.domain.exceptions import InvalidAmountError
from loan_ops.utils.date_utils import add_months


def schedule(
    total: int,
    term_months: Optional[int],
    start_date: date,
) -> List[ScheduleEntry]:
    """
    Split a repayment total into monthly installments.

    Requirements:
    - One installment per month, numbered 1..term_months
    - Due dates step by calendar months from start_date (not fixed 30 days)
    - Last installment absorbs rounding remainder so the sum is exact

    Args:
        total: Amount to repay (payment_amount, or amount when absent)
        term_months: Number of monthly installments; None or <= 0 gives no schedule
        start_date: Contract date; the first installment is due one month later

    Returns:
        List of ScheduleEntry objects ordered by month_number

    Example:
        1_000_000 over 3 months from 2024-01-15
        -> 333333 (02-15), 333333 (03-15), 333334 (04-15)
    """
    if total < 0:
        raise InvalidAmountError(f"Repayment total must not be negative: {total}")

    if not term_months or term_months <= 0:
        return []

    base_amount = total // term_months

    entries = []
    for month_number in range(1, term_months + 1):
        # Last installment absorbs remainder to ensure exact total
        if month_number == term_months:
            amount = total - base_amount * (term_months - 1)
        else:
            amount = base_amount

        entries.append(
            ScheduleEntry(
                month_number=month_number,
                due_date=add_months(start_date, month_number),
                expected_amount=amount,
            )
        )

    return entries


def schedule_for_application(app: Application) -> List[ScheduleEntry]:
    """Schedule from the application's repayment total, term and creation date"""
    return schedule(app.repayment_total, app.term_months, app.created_at)
