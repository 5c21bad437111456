"""Prometheus metrics configuration."""

from __future__ import annotations

import structlog
from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

logger = structlog.get_logger("shortbox.metrics")

# Application info
app_info = Gauge(
    "app_info",
    "Application information",
    ["version"],
)

# Processing metrics
comics_processed_total = Counter(
    "comics_processed_total",
    "Total number of comic files processed",
    ["outcome", "confidence"],  # outcome: success, failure
)
batch_runs_total = Counter(
    "batch_runs_total",
    "Total number of batch runs",
    ["status"],  # status: complete, cancelled
)
batch_duration_seconds = Histogram(
    "batch_duration_seconds",
    "Duration of batch runs in seconds",
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
)

# Scraper metrics
scraper_lookups_total = Counter(
    "scraper_lookups_total",
    "Total number of scraper fallback lookups",
    ["result"],  # result: knowledge, api, no_match, invalid_key, no_series
)


def setup_metrics(app: FastAPI, app_version: str) -> None:
    """Setup Prometheus metrics using prometheus-fastapi-instrumentator.

    Args:
        app: FastAPI application instance
        app_version: Application version
    """
    if getattr(app.state, "_metrics_initialized", False):
        logger.debug("Metrics already initialized for this app instance, skipping")
        return

    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            "/metrics",
            "/docs",
            "/openapi.json",
            "/redoc",
        ],
    )

    # Adds the middleware and the /metrics route
    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    app.state._metrics_initialized = True
    app_info.labels(version=app_version).set(1)

    logger.info("Metrics initialized", version=app_version)
