"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
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

quotes_calculated = Counter(
    'quotes_calculated_total',
    'Total quotes priced by the engine',
    ['service_type'],
    registry=registry
)

quote_failures = Counter(
    'quote_failures_total',
    'Total quote calculations aborted by an error',
    ['reason'],
    registry=registry
)

minimum_price_applied = Counter(
    'minimum_price_applied_total',
    'Total quotes clamped to the minimum price',
    registry=registry
)

quote_duration = Histogram(
    'quote_calculation_duration_seconds',
    'Pricing engine calculation time in seconds',
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache_key'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache_key'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def track_quote(func: Callable) -> Callable:
    """Decorator recording duration and outcome of a synchronous pricing call"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            quote_failures.labels(reason=type(e).__name__).inc()
            raise
        finally:
            quote_duration.observe(time.time() - start_time)
        quotes_calculated.labels(service_type=result.service_type).inc()
        if result.minimum_price_applied:
            minimum_price_applied.inc()
        return result
    return wrapper


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    return generate_latest(registry).decode('utf-8')
