"""Prometheus metrics for monitoring dashboard computations and upstream health"""

from prometheus_client import Counter, Histogram

# Dashboard metrics
dashboard_computation_counter = Counter(
    "paydash_dashboard_computations_total",
    "Dashboard aggregates computed",
)

dashboard_payment_count_histogram = Histogram(
    "paydash_dashboard_payment_count",
    "Payments aggregated per dashboard computation",
    buckets=[0, 10, 100, 500, 1000, 2500, 5000, 10000],
)

# Data quality
malformed_amount_counter = Counter(
    "paydash_malformed_amount_total",
    "Payment records whose amount could not be parsed and was counted as zero",
)

# Payments API metrics
payments_fetch_failures_counter = Counter(
    "payments_fetch_failures_total",
    "Failed payments API calls",
    ["resource"],  # payments | merchants | codes
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_dashboard(payment_count: int) -> None:
    """Record one dashboard computation and the size of its input"""
    dashboard_computation_counter.inc()
    dashboard_payment_count_histogram.observe(payment_count)
