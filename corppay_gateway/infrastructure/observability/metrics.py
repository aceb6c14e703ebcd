"""Prometheus metrics for monitoring settlement outcomes, holds and request latency"""

from decimal import Decimal
from typing import Optional

from prometheus_client import Counter, Histogram

# Settlement metrics
settlement_counter = Counter(
    "corppay_settlement_total",
    "Payment requests by terminal outcome",
    ["outcome", "error_code"],  # SUCCESS | FAILED | HELD
)

settled_amount_bucket_counter = Counter(
    "corppay_settled_amount_bucket",
    "Settled payments by amount bucket",
    ["bucket"],  # <1k, 1k-2L, 2L-5L, 5L+
)

settlement_latency_histogram = Histogram(
    "corppay_settlement_latency_seconds",
    "Time spent in the settlement pipeline",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5],
)

# Inquiry metrics
inquiry_counter = Counter(
    "corppay_inquiry_total",
    "Account listing and status inquiries",
    ["operation", "outcome"],
)

transport_error_counter = Counter(
    "corppay_transport_errors_total",
    "Requests rejected before reaching the domain pipeline",
    ["http_code"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_settlement(outcome: str, error_code: Optional[str], amount: Optional[Decimal] = None) -> None:
    """Record outcome metrics and, for settled payments, the amount distribution"""
    settlement_counter.labels(outcome=outcome, error_code=error_code or "").inc()

    if amount is None:
        return

    if amount < 1_000:
        bucket = "<1k"
    elif amount < 200_000:
        bucket = "1k-2L"
    elif amount <= 500_000:
        bucket = "2L-5L"
    else:
        bucket = "5L+"

    settled_amount_bucket_counter.labels(bucket=bucket).inc()
