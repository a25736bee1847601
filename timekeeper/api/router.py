"""API router aggregation."""

from fastapi import APIRouter

from timekeeper.api.analytics import router as analytics_router
from timekeeper.api.health import router as health_router
from timekeeper.api.meetings import router as meetings_router
from timekeeper.api.session import router as session_router
from timekeeper.api.templates import router as templates_router

api_router = APIRouter()
api_router.include_router(health_router)

# Storage endpoints, consumed by remote controllers through HttpBackend
resource_router = APIRouter(prefix="/api")


@resource_router.get("")
async def hello() -> dict[str, str]:
    """Greeting used to check the API is reachable."""
    return {"message": "Hello from the Timekeeper API!"}


resource_router.include_router(meetings_router)
resource_router.include_router(templates_router)
resource_router.include_router(analytics_router)
# Controller intents for a UI
resource_router.include_router(session_router)

api_router.include_router(resource_router)
