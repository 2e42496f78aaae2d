"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry
import time
from functools import wraps
from typing import Callable

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quotes_total = Counter(
    'quotes_total',
    'Total quote requests by outcome',
    ['outcome'],
    registry=registry
)

upstream_requests = Counter(
    'upstream_requests_total',
    'Total outbound requests to collaborating services',
    ['service', 'status'],
    registry=registry
)

upstream_duration = Histogram(
    'upstream_request_duration_seconds',
    'Outbound request duration in seconds',
    ['service'],
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def track_upstream(service: str):
    """Decorator to track outbound call metrics"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                upstream_requests.labels(service=service, status='success').inc()
                return result
            except Exception:
                upstream_requests.labels(service=service, status='error').inc()
                raise
            finally:
                upstream_duration.labels(service=service).observe(time.time() - start_time)
        return wrapper
    return decorator


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
