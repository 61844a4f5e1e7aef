"""Prometheus metrics for store access, installment scheduling and ledger invariants"""

from prometheus_client import Counter, Histogram, Gauge

# Store metrics
store_read_latency_histogram = Histogram(
    "finansix_store_read_latency_seconds",
    "Ledger store read latency",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

store_failure_counter = Counter(
    "finansix_store_failures_total",
    "Failed ledger store calls",
    ["operation"],
)

# Installment metrics
installment_plans_counter = Counter(
    "finansix_installment_plans_total",
    "Installment plans written to the store",
)

installments_created_counter = Counter(
    "finansix_installments_created_total",
    "Individual installment rows written to the store",
)

# Invariant violations
consistency_error_counter = Counter(
    "finansix_consistency_errors_total",
    "Ledger invariant violations detected",
    ["component"],
)

# Free balance
free_balance_gauge = Gauge(
    "finansix_last_free_balance_cents",
    "Most recent free balance computed per projection mode",
    ["mode"],  # with_projections | without_projections
)


def record_installment_plan(installment_count: int) -> None:
    """Record a written installment plan"""
    installment_plans_counter.inc()
    installments_created_counter.inc(installment_count)


def record_free_balance(free_balance_cents: int, include_projections: bool) -> None:
    mode = "with_projections" if include_projections else "without_projections"
    free_balance_gauge.labels(mode=mode).set(free_balance_cents)
