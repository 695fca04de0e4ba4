"""Structured Logging — JSON log lines carrying error causes, and a log-backed metrics sink.

Invariants:
    - Every line has timestamp, level, logger, message, and service when configured
    - A record tagged with an error cause also carries that cause's HTTP status
    - Request and post identifiers surfaced when present; unknown extras dropped
    - The internal half of a TwoFaceError reaches logs and nowhere else

Design Decisions:
    - Stdlib logging + json: no structlog/loguru dependency for one formatter
    - setup_logging called once on startup via lifespan
    - LoggingMetricsSink is the no-scrape alternative to PrometheusMetricsSink
      (local runs, debugging); both are injected, neither is module-level
"""

import json
import logging
from datetime import datetime, timezone

from quietbackend.core.errors import Cause

_CONTEXT_KEYS = ("path", "post_id", "owner_id", "endpoint", "result", "duration_ms")


def _cause_fields(record: logging.LogRecord) -> dict:
    cause = getattr(record, "cause", None)
    if cause is None:
        return {}
    fields = {"cause": str(cause)}
    status = getattr(record, "status", None)
    if status is None:
        try:
            status = Cause(cause).http_status
        except ValueError:
            pass
    if status is not None:
        fields["status"] = status
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            log["service"] = self.service
        log.update(_cause_fields(record))
        log.update(
            (key, record.__dict__[key]) for key in _CONTEXT_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json", service: str | None = None):
    """Install one root handler in JSON or human-readable format."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter(service))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class LoggingMetricsSink:
    """MetricsSink that emits one structured log line per observed handler call."""

    def __init__(self, logger_name: str = "quietbackend.metrics"):
        self._logger = logging.getLogger(logger_name)

    def observe(self, endpoint: str, result: str, duration_seconds: float) -> None:
        self._logger.info(
            f"{endpoint} {result}",
            extra={
                "endpoint": endpoint,
                "result": result,
                "duration_ms": round(duration_seconds * 1000, 3),
            },
        )
