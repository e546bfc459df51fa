"""Prometheus metrics for monitoring outcomes, confirmations and ledger performance"""

from prometheus_client import Counter, Histogram
from wallet_gateway.domain.models import OutcomeKind

# Evaluation metrics
outcome_counter = Counter(
    "wallet_outcome_total",
    "Draft evaluations by outcome",
    ["kind"],  # blocked | denied | warn_confirm | confirm_expense | confirm_income
)

resolution_counter = Counter(
    "wallet_resolution_total",
    "How reviews were resolved",
    ["resolution"],  # submitted | cancelled_safety_stop | cancelled_deferred | persistence_failed
)

# Ledger metrics
persistence_latency_histogram = Histogram(
    "ledger_persist_latency_seconds",
    "Ledger persistence response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

persistence_failure_counter = Counter(
    "ledger_persist_failures_total",
    "Failed ledger persistence attempts",
)

# Registry API metrics
registry_fetch_failures_counter = Counter(
    "registry_fetch_failures_total",
    "Failed registry API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_outcome(kind: OutcomeKind) -> None:
    """Record one evaluation so warn/deny rates can be tracked"""
    outcome_counter.labels(kind=kind.value).inc()


def record_resolution(resolution: str) -> None:
    resolution_counter.labels(resolution=resolution).inc()
