"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from dateutil.relativedelta import relativedelta


def as_date(value: date) -> date:
    """Calendar date of a date or datetime"""
    if isinstance(value, datetime):
        return value.date()
    return value


def as_utc(value: datetime) -> datetime:
    """Aware datetime; naive values are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_months(start: date, months: int) -> date:
    """Calendar-month arithmetic; Jan 31 + 1 month -> Feb 28/29"""
    return as_date(start) + relativedelta(months=months)


def sunday_weekday(day: date) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6"""
    return (day.weekday() + 1) % 7


def week_of_year(day: date) -> int:
    """
    Sunday-started week number, 1-based.

    Week 1 runs from January 1st to the first Saturday; each later week
    starts on a Sunday.
    """
    day = as_date(day)
    jan1 = date(day.year, 1, 1)
    day_of_year = day.timetuple().tm_yday
    return (day_of_year - 1 + sunday_weekday(jan1)) // 7 + 1


def day_key(value: date) -> str:
    return as_date(value).isoformat()


def week_key(value: date) -> str:
    """Year-week bucket key, e.g. 2024-W03"""
    day = as_date(value)
    return f"{day.year}-W{week_of_year(day):02d}"
