"""Prometheus metrics for record creation, voucher rejections and numbering conflicts"""

from prometheus_client import Counter, Histogram

# Record metrics
records_created_counter = Counter(
    "fintcs_records_created_total",
    "Records persisted",
    ["entity"],  # society | member | loan | voucher | system_user | monthly_demand
)

voucher_rejected_counter = Counter(
    "fintcs_voucher_rejected_total",
    "Vouchers refused because debits and credits did not balance",
)

# Numbering metrics
sequence_conflict_counter = Counter(
    "fintcs_sequence_conflicts_total",
    "Generated identifiers that collided with an existing record",
    ["entity"],
)

sequence_format_error_counter = Counter(
    "fintcs_sequence_format_errors_total",
    "Stored identifiers that could not be parsed when generating the next one",
    ["entity"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_created(entity: str) -> None:
    records_created_counter.labels(entity=entity).inc()
