"""
Prometheus metrics for the subscription service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Subscription metrics
subscriptions_requested_total = Counter(
    "subscriptions_requested_total",
    "Total subscription requests",
)

subscriptions_approved_total = Counter(
    "subscriptions_approved_total",
    "Total subscriptions approved without activation",
)

subscriptions_activated_total = Counter(
    "subscriptions_activated_total",
    "Total subscriptions moved to ACTIVE",
)

subscriptions_deactivated_total = Counter(
    "subscriptions_deactivated_total",
    "Total subscriptions moved to INACTIVE",
)

subscriptions_expired_total = Counter(
    "subscriptions_expired_total",
    "Total subscriptions moved to EXPIRED by the sweeper",
)

# Catalog metrics
packs_changed_total = Counter(
    "subscription_packs_changed_total",
    "Total catalog changes",
    ["action"],
)

# Sweeper metrics
expiry_sweep_failures_total = Counter(
    "subscription_expiry_sweep_failures_total",
    "Records the expiry sweep could not update",
)

expiry_sweep_duration_seconds = Histogram(
    "subscription_expiry_sweep_duration_seconds",
    "Duration of one expiry sweep in seconds",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type"],
)
