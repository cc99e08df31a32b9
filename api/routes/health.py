"""
Health Check Routes
===================

Kubernetes-compatible health and readiness endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api import __version__
from api.routes.dependencies import get_store
from api.schemas import HealthResponse, HealthStatus, ReadinessResponse
from query_wise.store.base import TabularStore

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the service",
)
async def health_check(store: TabularStore = Depends(get_store)) -> HealthResponse:
    """
    Health check endpoint for load balancers and monitoring.

    The service stays up without its database, so a failed store check
    reports DEGRADED rather than UNHEALTHY.
    """
    checks = {
        "api": True,
        "store": await store.ping(),
    }
    status = HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED

    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Returns whether the service is ready to handle requests",
)
async def readiness_check(store: TabularStore = Depends(get_store)) -> ReadinessResponse:
    """Readiness check for Kubernetes; the store must answer a trivial query."""
    checks = {
        "store_reachable": await store.ping(),
    }

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Simple liveness check",
)
async def liveness_check() -> dict:
    """Liveness check: the process is running."""
    return {"status": "ok"}
