"""
Prometheus Metrics
==================

Application metrics for monitoring and alerting.
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

# Custom registry so tests can create several apps in one process
REGISTRY = CollectorRegistry()

APP_INFO = Info(
    "querywise",
    "QueryWise application information",
    registry=REGISTRY,
)

QUERY_EXECUTIONS_TOTAL = Counter(
    "querywise_query_executions_total",
    "Structured queries executed",
    ["path", "status"],  # path: manual, ai
    registry=REGISTRY,
)

QUERY_ROWS = Histogram(
    "querywise_query_rows",
    "Rows returned per executed query",
    buckets=[0, 1, 10, 50, 100, 500, 1000],
    registry=REGISTRY,
)

PIPELINE_OUTCOMES_TOTAL = Counter(
    "querywise_pipeline_outcomes_total",
    "Natural-language pipeline outcomes",
    ["outcome"],  # completed, needs_clarification, unresolvable, error
    registry=REGISTRY,
)

REASONING_FAILURES_TOTAL = Counter(
    "querywise_reasoning_failures_total",
    "Reasoning capability calls that failed or returned non-conforming output",
    ["operation"],  # validate, translate, ask
    registry=REGISTRY,
)

PIPELINE_DURATION = Histogram(
    "querywise_pipeline_duration_seconds",
    "Natural-language pipeline duration in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=REGISTRY,
)

ACTIVE_REQUESTS = Gauge(
    "querywise_active_requests",
    "Query requests currently being processed",
    registry=REGISTRY,
)


def setup_metrics(app: FastAPI, version: str, environment: str) -> None:
    """
    Set up Prometheus metrics for the FastAPI application.

    Args:
        app: FastAPI application instance
        version: Application version
        environment: Deployment environment name
    """
    APP_INFO.info({"version": version, "environment": environment})

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable) -> Response:
        """Middleware to track HTTP metrics."""
        start_time = time.perf_counter()
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        is_query_endpoint = request.url.path.startswith("/api/v1/query")
        if is_query_endpoint:
            ACTIVE_REQUESTS.inc()

        try:
            response = await call_next(request)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=endpoint,
                status=response.status_code,
            ).inc()
            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.perf_counter() - start_time)
            return response
        finally:
            if is_query_endpoint:
                ACTIVE_REQUESTS.dec()


def track_execution(path: str, success: bool, rows: int = 0) -> None:
    """
    Track a structured query execution.

    Args:
        path: ``manual`` or ``ai``
        success: Whether the execution returned rows without error
        rows: Number of rows returned
    """
    QUERY_EXECUTIONS_TOTAL.labels(path=path, status="success" if success else "failure").inc()
    if success:
        QUERY_ROWS.observe(rows)


def track_pipeline(outcome: str, duration_seconds: float) -> None:
    """Track one pass through the natural-language pipeline."""
    PIPELINE_OUTCOMES_TOTAL.labels(outcome=outcome).inc()
    PIPELINE_DURATION.observe(duration_seconds)


def track_reasoning_failure(operation: str) -> None:
    REASONING_FAILURES_TOTAL.labels(operation=operation).inc()


async def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
