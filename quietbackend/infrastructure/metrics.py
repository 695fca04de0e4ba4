"""Prometheus Metrics — handler timings, result counts, HTTP statuses and pool gauges.

Invariants:
    - Every metric lives in an injected CollectorRegistry, never the process-global one
    - quietbackend_handler_secs{endpoint_name} and quietbackend_responses{endpoint_name,
      result} move once per observed handler call
    - quietbackend_http_responses{status} moves once per response served
    - Pool gauges are read from engine.pool at scrape time, not cached

Design Decisions:
    - One registry per app: tests build several apps in one process without
      "Duplicated timeseries" errors
    - Pool gauges as a custom collector: only pools that track checkouts
      (QueuePool) report; StaticPool/NullPool yield nothing
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest,
)
from prometheus_client.core import GaugeMetricFamily
from sqlalchemy.engine import Engine

HANDLER_BUCKETS = (1.0, 2.0, 4.0, 16.0)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "ConnectionPoolCollector",
    "HttpStatusCounter",
    "PrometheusMetricsSink",
    "render_latest",
]


class PrometheusMetricsSink:
    """MetricsSink recording handler durations and ok/err counts."""

    def __init__(self, registry: CollectorRegistry):
        self.handler_secs = Histogram(
            "quietbackend_handler_secs",
            "Seconds taken for each response, partitioned by endpoint name",
            ["endpoint_name"],
            buckets=HANDLER_BUCKETS,
            registry=registry,
        )
        self.responses = Counter(
            "quietbackend_responses",
            "How many responses of ok/err per endpoint",
            ["endpoint_name", "result"],
            registry=registry,
        )

    def observe(self, endpoint: str, result: str, duration_seconds: float) -> None:
        self.handler_secs.labels(endpoint_name=endpoint).observe(duration_seconds)
        self.responses.labels(endpoint_name=endpoint, result=result).inc()


class HttpStatusCounter:
    """Counts every HTTP status code served."""

    def __init__(self, registry: CollectorRegistry):
        self._counter = Counter(
            "quietbackend_http_responses",
            "Count of each HTTP status code served by quietbackend responses",
            ["status"],
            registry=registry,
        )

    def increment(self, status_code: int) -> None:
        self._counter.labels(status=str(status_code)).inc()


class ConnectionPoolCollector:
    """Reports open and idle database connections of an engine's pool."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def collect(self):
        pool = self._engine.pool
        if not (hasattr(pool, "checkedin") and hasattr(pool, "checkedout")):
            return
        idle = pool.checkedin()
        yield GaugeMetricFamily(
            "quietbackend_db_connections_idle",
            "How many DB connections are currently idle",
            value=idle,
        )
        yield GaugeMetricFamily(
            "quietbackend_db_connections",
            "How many DB connections are open",
            value=idle + pool.checkedout(),
        )


def render_latest(registry: CollectorRegistry) -> bytes:
    """Text exposition of every metric in ``registry``."""
    return generate_latest(registry)
