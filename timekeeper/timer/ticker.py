"""Tick sources that drive the timer engine."""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class TickSource(Protocol):
    """Periodic trigger consumed by the timer engine.

    Implementations call the callback once per interval until stopped.
    """

    def start(self, callback: Callable[[], None]) -> None:
        """Begin calling ``callback`` periodically."""
        ...

    def stop(self) -> None:
        """Stop calling the callback. Safe to call when not started."""
        ...

    @property
    def active(self) -> bool:
        """Whether ticks are currently being produced."""
        ...


class IntervalTicker:
    """Tick source backed by an asyncio task on the running loop."""

    def __init__(self, interval_seconds: float = 1.0):
        """Initialize ticker.

        Args:
            interval_seconds: Delay between ticks
        """
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[], None]) -> None:
        """Start ticking. Requires a running event loop.

        A ticker that is already active is restarted with the new callback.
        """
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                callback()
            except Exception as e:
                logger.error(f"Tick callback failed: {e}")
