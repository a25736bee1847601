"""In-process notification bus.

The timekeeping core runs mostly synchronous code (the timer ticks, the
scheduler validates), so the bus offers ``emit`` for fire-and-forget
delivery alongside the awaitable ``publish``. Whatever renders
notifications either subscribes or polls ``recent``.
"""

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from typing import TypeVar

from timekeeper.events.base import Event

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Event)
EventHandler = Callable[[Event], None] | Callable[[Event], Awaitable[None]]


class EventBus:
    """Routes notifications to handlers by event class.

    Subscribing to ``Event`` itself receives every notification. Handlers
    run concurrently and a failing handler is logged without affecting the
    others or the publisher.
    """

    def __init__(self, history_size: int = 100):
        """Initialize event bus.

        Args:
            history_size: Number of recent events kept for polling
        """
        self._handlers: dict[type[Event], list[EventHandler]] = {}
        self._history: deque[Event] = deque(maxlen=history_size)
        self._in_flight: set[asyncio.Task] = set()

    def subscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None] | Callable[[T], Awaitable[None]],
    ) -> None:
        """Call ``handler`` for every published ``event_type``."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Handler added for {event_type.__name__}")

    def unsubscribe(self, event_type: type[T], handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event_type: type[Event]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: Event) -> None:
        """Record an event and deliver it to every interested handler."""
        self._history.append(event)
        handlers = self._handlers.get(type(event), [])
        if type(event) is not Event:
            handlers = handlers + self._handlers.get(Event, [])
        if not handlers:
            return

        results = await asyncio.gather(
            *(self._deliver(handler, event) for handler in handlers),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, Exception)]
        for failure in failures:
            logger.error(f"Handler for {event.event_type} failed: {failure}")

    def emit(self, event: Event) -> None:
        """Publish without waiting, for callers that cannot await.

        Delivery is scheduled on the running loop. Without one the event
        is only recorded for ``recent``.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._history.append(event)
            return
        task = loop.create_task(self.publish(event))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def drain(self) -> None:
        """Wait until everything emitted so far has been delivered."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    def recent(self, limit: int = 20) -> list[Event]:
        """Up to ``limit`` latest events, oldest first."""
        if limit <= 0:
            return []
        return list(self._history)[-limit:]

    @staticmethod
    async def _deliver(handler: EventHandler, event: Event) -> None:
        if inspect.iscoroutinefunction(handler):
            await handler(event)
        else:
            # Sync handlers may block (sound, desktop notifications)
            await asyncio.to_thread(handler, event)
