"""Countdown timer engine and tick sources."""

from timekeeper.timer.engine import WARNING_THRESHOLDS, TimerEngine
from timekeeper.timer.session import (
    TimerDecision,
    TimerOutcome,
    TimerSession,
    TimerState,
)
from timekeeper.timer.ticker import IntervalTicker, TickSource

__all__ = [
    "WARNING_THRESHOLDS",
    "IntervalTicker",
    "TickSource",
    "TimerDecision",
    "TimerEngine",
    "TimerOutcome",
    "TimerSession",
    "TimerState",
]
