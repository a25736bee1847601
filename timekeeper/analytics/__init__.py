"""Completion analytics."""

from timekeeper.analytics.aggregator import (
    AnalyticsAggregator,
    compute_kpis,
    efficiency_percent,
    round_half_up,
)

__all__ = [
    "AnalyticsAggregator",
    "compute_kpis",
    "efficiency_percent",
    "round_half_up",
]
