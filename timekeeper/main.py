"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timekeeper.adapters.local_snapshot import LocalSnapshot
from timekeeper.adapters.store_backend import StoreBackend
from timekeeper.api.router import api_router
from timekeeper.config import settings
from timekeeper.controller import Timekeeper
from timekeeper.db.json_store import JsonStore
from timekeeper.events.bus import EventBus

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_background_jobs_context():
    """Get background jobs lifespan context manager.

    Returns a no-op context if the scheduler is disabled via settings.
    """
    from timekeeper.scheduling.jobs import background_jobs_lifespan

    # Allow disabling scheduler for tests
    if settings.disable_scheduler:

        @asynccontextmanager
        async def noop_context():
            yield

        return noop_context()

    return background_jobs_lifespan()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Open the JSON data file
    - Initialize event bus
    - Load the Timekeeper controller and start background jobs

    Shutdown:
    - Save controller state
    - Close the data file
    """
    # Startup
    logger.info("Starting Timekeeper...")

    store = JsonStore()
    await store.connect()
    app.state.store = store

    event_bus = EventBus()
    app.state.event_bus = event_bus
    logger.info("Event bus initialized")

    timekeeper = Timekeeper(
        backend=StoreBackend(store),
        local=LocalSnapshot(),
        event_bus=event_bus,
    )
    await timekeeper.load()
    Timekeeper.set_instance(timekeeper)
    app.state.timekeeper = timekeeper
    logger.info(
        f"Timekeeper loaded: {len(timekeeper.state.meetings)} meetings, "
        f"{len(timekeeper.state.templates)} templates"
    )

    async with AsyncExitStack() as stack:
        await stack.enter_async_context(_get_background_jobs_context())
        yield

    # Shutdown
    logger.info("Shutting down Timekeeper...")
    await timekeeper.close()
    Timekeeper.reset_instance()
    await store.close()
    logger.info("Data file closed")


app = FastAPI(
    title=settings.app_name,
    description="Meeting timekeeping with agenda templates and analytics",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "timekeeper.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=True,
    )
