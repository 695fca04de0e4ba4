"""quietbackend API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers render TwoFaceError → {"error": "<Cause>: <text>"}
    - The post store is chosen once, at construction: passed to create_app() or
      built from settings in the lifespan
    - The store is closed on shutdown
    - Each app owns one CollectorRegistry, scraped at GET /metrics

Design Decisions:
    - App factory over a bare module global: tests build apps around an
      InMemoryPostStore without touching settings or a database
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Metrics served by the API app itself rather than a second listener
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from quietbackend.api.error_handlers import register_error_handlers
from quietbackend.api.middleware import register_response_metrics
from quietbackend.api.routes import admin, health, metrics as metrics_route, posts
from quietbackend.config import get_settings
from quietbackend.core.repository_protocols import MetricsSink, PostStore
from quietbackend.infrastructure.metrics import HttpStatusCounter, PrometheusMetricsSink
from quietbackend.infrastructure.observability import LoggingMetricsSink, setup_logging
from quietbackend.infrastructure.store_factory import build_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.service_name)
    if app.state.store is None:
        app.state.store = build_store(settings, app.state.metrics_registry)
    logger.info("quietbackend API started")
    yield
    logger.info("quietbackend API shutting down")
    await app.state.store.close()


def _default_metrics_sink(registry: CollectorRegistry) -> MetricsSink:
    if get_settings().metrics_sink == "log":
        return LoggingMetricsSink()
    return PrometheusMetricsSink(registry)


def create_app(
    store: PostStore | None = None,
    metrics: MetricsSink | None = None,
    registry: CollectorRegistry | None = None,
) -> FastAPI:
    app = FastAPI(title="quietbackend API", version="1.0.0", lifespan=lifespan)
    if registry is None:
        registry = CollectorRegistry()
    app.state.store = store
    app.state.metrics_registry = registry
    app.state.metrics = metrics if metrics is not None else _default_metrics_sink(registry)

    app.include_router(health.router)
    app.include_router(posts.router)
    app.include_router(admin.router)
    app.include_router(metrics_route.router)

    register_error_handlers(app)
    register_response_metrics(app, HttpStatusCounter(registry))
    return app


app = create_app()
