"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'eventspot_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, insufficient, not_found
)

booking_latency = Histogram(
    'eventspot_booking_latency_seconds',
    'Time spent inside the per-event inventory critical section',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_cancellations = Counter(
    'eventspot_booking_cancellations_total',
    'Bookings cancelled and seats released'
)

# Cache metrics
cache_operations = Counter(
    'eventspot_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# Session metrics
sessions_created = Counter(
    'eventspot_sessions_created_total',
    'Sessions created on login or registration'
)

active_sessions = Gauge(
    'eventspot_active_sessions',
    'Sessions currently held by the in-memory store'
)

redis_connection_errors = Counter(
    'eventspot_redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Render every registered metric in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, insufficient, not_found"""
    booking_attempts.labels(status=status).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
