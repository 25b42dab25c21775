"""Unit tests for dashboard aggregation"""

import pytest
from datetime import date, datetime
from loan_ops.domain.aggregation import (
    application_stats,
    by_entity,
    debt_by_entity,
    over_time,
    status_distribution,
)
from loan_ops.domain.filters import filter_applications
from loan_ops.domain.models import Application, Category, FilterSpec, Payment
from loan_ops.domain.exceptions import InvalidAmountError, UnsupportedDimensionError
from loan_ops.utils.date_utils import week_key, week_of_year


def test_by_entity_fillial(applications, directory):
    result = by_entity(applications, "fillial", directory)

    assert [(e.id, e.label, e.value) for e in result] == [
        (20, "Registon", 2),
        (-1, "#-1", 1),
        (10, "Chilonzor", 1),
        (11, "Sergeli", 1),
        (99, "#99", 1),
    ]


def test_by_entity_merchant_ties_sorted_by_id(applications, directory):
    result = by_entity(applications, "merchant", directory)

    assert [(e.id, e.label, e.value) for e in result] == [
        (-1, "#-1", 2),
        (1, "Texnomart", 2),
        (2, "Mediapark", 2),
    ]


def test_by_entity_custom_labels(applications, directory):
    result = by_entity(applications, "fillial", directory, name_lookup={20: "Samarqand, Registon"})

    assert result[0].label == "Samarqand, Registon"
    assert result[2].label == "#10"


def test_by_entity_unknown_dimension(applications, directory):
    with pytest.raises(UnsupportedDimensionError):
        by_entity(applications, "region", directory)


def test_status_distribution_literal_first_seen_order(applications):
    extra = Application(id=7, raw_status="CONFIRMED", amount=1, created_at=datetime(2024, 3, 2))
    nameless = Application(id=8, raw_status=None, amount=1, created_at=datetime(2024, 3, 2))

    result = status_distribution(applications + [extra, nameless])

    assert result.labels == [
        "CONFIRMED",
        "FINISHED",
        "CANCELED_BY_CLIENT",
        "WAITING_BANK_CONFIRM",
        "ACTIVE",
        "LIMIT",
        "UNKNOWN",
    ]
    assert result.series == [2, 1, 1, 1, 1, 1, 1]


def test_over_time_by_day(applications):
    result = over_time(applications, "day")

    assert result.categories == [
        "2024-01-01",
        "2024-01-15",
        "2024-01-16",
        "2024-02-03",
        "2024-02-10",
        "2024-03-01",
    ]
    assert result.series == [1, 1, 1, 1, 1, 1]


def test_over_time_by_week_merges_same_week(applications):
    result = over_time(applications, "week")

    # 2024-01-15 and 2024-01-16 share a week
    assert result.categories == ["2024-W01", "2024-W03", "2024-W05", "2024-W06", "2024-W09"]
    assert result.series == [1, 2, 1, 1, 1]


def test_over_time_week_keys_sort_chronologically():
    apps = [
        Application(id=1, raw_status="NEW", amount=0, created_at=datetime(2024, 3, 10)),
        Application(id=2, raw_status="NEW", amount=0, created_at=datetime(2024, 2, 20)),
    ]

    result = over_time(apps, "week")

    assert result.categories == ["2024-W08", "2024-W11"]


def test_over_time_unknown_granularity(applications):
    with pytest.raises(UnsupportedDimensionError):
        over_time(applications, "month")


def test_over_time_empty():
    result = over_time([], "week")

    assert result.categories == []
    assert result.series == []


def test_week_numbers_start_on_sunday():
    # 2023-01-01 is a Sunday
    assert week_of_year(date(2023, 1, 1)) == 1
    assert week_of_year(date(2023, 1, 7)) == 1
    assert week_of_year(date(2023, 1, 8)) == 2
    # 2024-01-01 is a Monday; the first Sunday opens week 2
    assert week_of_year(date(2024, 1, 6)) == 1
    assert week_of_year(date(2024, 1, 7)) == 2
    assert week_key(datetime(2024, 12, 31, 23, 0)) == "2024-W53"


@pytest.mark.parametrize(
    "spec",
    [
        FilterSpec(),
        FilterSpec(status=Category.FINISHED),
        FilterSpec(merchant_id=1),
        FilterSpec(agent_id=7),
        FilterSpec(start_date=date(2024, 1, 10), end_date=date(2024, 2, 5)),
    ],
)
def test_every_mode_accounts_for_every_application(applications, directory, spec):
    filtered = filter_applications(applications, spec, directory)
    size = len(filtered)

    assert sum(e.value for e in by_entity(filtered, "fillial", directory)) == size
    assert sum(e.value for e in by_entity(filtered, "merchant", directory)) == size
    assert sum(status_distribution(filtered).series) == size
    assert sum(over_time(filtered, "day").series) == size
    assert sum(over_time(filtered, "week").series) == size


def test_application_stats(applications):
    stats = application_stats(applications)

    assert stats.total_count == 6
    assert stats.approved_amount == 2_400_000
    assert stats.approved_paid_amount == 500_000
    assert stats.approved_unpaid_amount == 1_900_000
    assert stats.product_count == 3


def test_debt_by_merchant(applications, directory):
    result = debt_by_entity(applications, "merchant", directory, as_of=date(2024, 3, 15))

    assert [(d.id, d.label, d.application_count) for d in result] == [(1, "Texnomart", 2), (-1, "#-1", 1)]
    texnomart = result[0]
    assert texnomart.total_amount == 1_700_000
    assert texnomart.remaining_debt == 1_700_000
    # 100,000 of app 1 (due 02-15) and 83,333 of app 2 (due 02-16)
    assert texnomart.overdue_amount == 183_333
    assert result[1].remaining_debt == 600_000
    assert result[1].overdue_amount == 300_000


def test_debt_by_fillial_skips_settled_loans(directory):
    owing = Application(
        id=1,
        raw_status="FINISHED",
        amount=200,
        term_months=2,
        created_at=datetime(2024, 1, 1),
        fillial_id=10,
        payments=[],
    )
    paid_off = Application(
        id=2,
        raw_status="FINISHED",
        amount=200,
        term_months=2,
        created_at=datetime(2024, 1, 1),
        fillial_id=11,
        payments=[Payment(amount=200, occurred_at=datetime(2024, 2, 1))],
    )

    result = debt_by_entity([owing, paid_off], "fillial", directory, as_of=date(2024, 2, 15))

    assert [(d.id, d.remaining_debt, d.overdue_amount) for d in result] == [(10, 200, 100)]


def test_application_stats_rejects_negative_amount(applications):
    broken = Application(id=7, raw_status="CONFIRMED", amount=-500, created_at=datetime(2024, 3, 2))

    with pytest.raises(InvalidAmountError):
        application_stats(applications + [broken])
