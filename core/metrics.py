"""
Prometheus metrics for the seat license service.

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

# Seat metrics
seats_redeemed_total = Counter(
    "seats_redeemed_total",
    "Total license keys redeemed into seats",
)

seats_assigned_total = Counter(
    "seats_assigned_total",
    "Total seats bound to a device",
)

seats_released_total = Counter(
    "seats_released_total",
    "Total device bindings cleared",
)

seats_removed_total = Counter(
    "seats_removed_total",
    "Total seats deleted by an administrator",
)

account_lock_transitions_total = Counter(
    "account_lock_transitions_total",
    "Account lock state changes",
    ["locked", "reason"],
)

# Webhook metrics
webhook_events_total = Counter(
    "webhook_events_total",
    "Provider webhook deliveries",
    ["event_name", "outcome"],
)

# Oracle metrics
provider_lookup_duration_seconds = Histogram(
    "provider_lookup_duration_seconds",
    "Payment provider API call duration in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
