"""Health probes for process supervisors and load balancers."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from timekeeper.config import settings

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Service identity and clock."""

    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Per-dependency results; ``ready`` only when the data file answers."""

    status: str
    checks: dict[str, str]


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report which Timekeeper build is answering."""
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.app_env,
        timestamp=datetime.now(UTC),
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """The process is up and serving requests."""
    return LivenessResponse(status="alive")


async def _store_check(request: Request) -> str:
    store = getattr(request.app.state, "store", None)
    if store is None:
        return "not_configured"
    return "ok" if await store.is_healthy() else "failed"


def _backend_check(request: Request) -> str | None:
    # A controller running on its local snapshot still serves, but degraded
    timekeeper = getattr(request.app.state, "timekeeper", None)
    if timekeeper is None:
        return None
    return "degraded" if timekeeper.state.degraded else "ok"


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """The JSON data file is readable and the controller is loaded."""
    checks = {"api": "ok", "store": await _store_check(request)}
    backend = _backend_check(request)
    if backend is not None:
        checks["backend"] = backend

    status = "ready" if checks["store"] == "ok" else "not_ready"
    return ReadinessResponse(status=status, checks=checks)
