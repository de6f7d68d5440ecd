"""
Prometheus metrics for the key service.

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

# Key metrics
keys_created_total = Counter(
    "keys_created_total",
    "Total keys created",
    ["policy"],
)

keys_revoked_total = Counter(
    "keys_revoked_total",
    "Total key revocations",
)

keys_deleted_total = Counter(
    "keys_deleted_total",
    "Total keys deleted",
)

key_activations_total = Counter(
    "key_activations_total",
    "Total first-use activations of duration keys",
    ["policy"],
)

key_verifications_total = Counter(
    "key_verifications_total",
    "Total key verifications",
    ["outcome"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
