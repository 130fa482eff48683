"""Prometheus metrics for ledger activity, budget verdicts and document-store sync"""

from prometheus_client import Counter, Histogram

# Ledger metrics
transaction_counter = Counter(
    "smart_ledger_transactions_total",
    "Transactions recorded",
    ["kind", "payment_method"],
)

debt_payment_counter = Counter(
    "smart_ledger_debt_payments_total",
    "Installment payment confirmations",
    ["outcome"],  # applied | already_paid | settled
)

feasibility_counter = Counter(
    "smart_ledger_feasibility_total",
    "Budget feasibility verdicts",
    ["verdict"],  # balanced | over_budget
)

# Document store sync metrics
sync_latency_histogram = Histogram(
    "document_store_sync_latency_seconds",
    "Document store write response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

sync_failure_counter = Counter(
    "document_store_sync_failures_total",
    "Failed document store writes",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(kind: str, payment_method: str) -> None:
    transaction_counter.labels(kind=kind, payment_method=payment_method).inc()


def record_debt_payment(outcome: str) -> None:
    debt_payment_counter.labels(outcome=outcome).inc()


def record_feasibility(balanced: bool) -> None:
    feasibility_counter.labels(verdict="balanced" if balanced else "over_budget").inc()
