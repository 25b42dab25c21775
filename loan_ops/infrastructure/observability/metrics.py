"""Prometheus metrics for dashboard queries, status mix, and debt reconciliation"""

from typing import Iterable
from prometheus_client import Counter, Histogram
from loan_ops.domain.models import Application, DebtSummary
from loan_ops.domain.status import classify

# Query metrics
query_counter = Counter(
    "loan_ops_query_total",
    "Dashboard queries served",
    ["kind"],  # applications | by_entity | status_distribution | over_time | debt | debts
)

category_counter = Counter(
    "loan_ops_application_category_total",
    "Applications returned by queries, by canonical category",
    ["category"],
)

# Reconciliation metrics
overdue_amount_histogram = Histogram(
    "loan_ops_overdue_amount",
    "Overdue amount per reconciled application",
    buckets=[0, 100_000, 500_000, 1_000_000, 5_000_000, 10_000_000, 50_000_000],
)

# Backend metrics
backend_fetch_failures_counter = Counter(
    "backend_fetch_failures_total",
    "Failed dashboard backend calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_query(kind: str, applications: Iterable[Application]) -> None:
    """Count the query and the category mix of what it returned"""
    query_counter.labels(kind=kind).inc()
    for app in applications:
        category_counter.labels(category=classify(app.raw_status).value).inc()


def record_reconciliation(summary: DebtSummary) -> None:
    overdue_amount_histogram.observe(summary.overdue_amount)
