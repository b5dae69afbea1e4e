"""Prometheus metrics for monitoring month openings, spending activity and persistence health"""

from prometheus_client import Counter, Histogram

# Ledger metrics
months_opened_counter = Counter(
    "zero_budget_months_opened_total",
    "Months opened for budgeting",
)

transactions_recorded_counter = Counter(
    "zero_budget_transactions_recorded_total",
    "Transactions appended to the log",
    ["source"],  # manual | recurring
)

# Persistence metrics
snapshot_flush_failures_counter = Counter(
    "zero_budget_snapshot_flush_failures_total",
    "Failed snapshot writes",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_month_opened(recurring_count: int) -> None:
    """Count the opening and the recurring transactions it materialized"""
    months_opened_counter.inc()
    if recurring_count:
        transactions_recorded_counter.labels(source="recurring").inc(recurring_count)


def record_manual_transaction() -> None:
    transactions_recorded_counter.labels(source="manual").inc()
