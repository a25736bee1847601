"""Completion records and KPI aggregation.

Percentages round half up (``round`` in Python rounds half to even,
which would report 12.5% as 12).
"""

import math
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog

from timekeeper.models.analytics import AnalyticsLog, CompletionRecord, KPISummary
from timekeeper.models.meeting import Meeting

logger = structlog.get_logger()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up."""
    return math.floor(value + 0.5)


def efficiency_percent(planned: int, actual: int) -> int:
    """planned / actual as a whole percent.

    Zero elapsed time counts as fully efficient (100).
    """
    if actual <= 0:
        return 100
    return round_half_up(planned / actual * 100)


def compute_kpis(records: Sequence[CompletionRecord]) -> KPISummary:
    """Aggregate KPIs over the full completion log.

    Args:
        records: Completion records, any order

    Returns:
        KPISummary; all zeros for an empty log
    """
    total = len(records)
    if total == 0:
        return KPISummary()

    avg_efficiency = round_half_up(sum(r.efficiency for r in records) / total)
    time_saved = sum(max(0, r.planned_duration - r.actual_duration) for r in records)
    on_time = sum(1 for r in records if r.on_time)

    return KPISummary(
        total_meetings=total,
        avg_efficiency=avg_efficiency,
        time_saved_minutes=time_saved,
        on_time_rate_percent=round_half_up(100 * on_time / total),
    )


class AnalyticsAggregator:
    """Folds finished meetings into the analytics log.

    Works on caller-owned state: the analytics log and the collection of
    not-yet-completed meetings.
    """

    def __init__(self, log: AnalyticsLog, meetings: list[Meeting] | None = None):
        """Initialize aggregator.

        Args:
            log: Analytics log, appended to in place
            meetings: Active/scheduled meetings; finished ones are removed
        """
        self._log = log
        self._meetings = meetings if meetings is not None else []

    @property
    def log(self) -> AnalyticsLog:
        return self._log

    def build_record(
        self,
        meeting: Meeting,
        actual_duration: int,
        completed_at: datetime | None = None,
    ) -> CompletionRecord:
        """Create the completion record for a meeting without storing it."""
        actual = max(0, actual_duration)
        planned = meeting.total_duration
        return CompletionRecord(
            meeting_id=meeting.id,
            title=meeting.title,
            planned_duration=planned,
            actual_duration=actual,
            efficiency=efficiency_percent(planned, actual),
            completed_at=completed_at or datetime.now(UTC),
            template_id=meeting.template_id,
        )

    def record_completion(
        self,
        meeting: Meeting,
        actual_duration: int,
        completed_at: datetime | None = None,
    ) -> CompletionRecord:
        """Append a completion record and end the meeting's lifecycle.

        Args:
            meeting: The finished meeting; planned duration is its total
            actual_duration: Elapsed minutes
            completed_at: Completion time override

        Returns:
            The appended CompletionRecord
        """
        record = self.build_record(meeting, actual_duration, completed_at)
        self._log.completed_meetings.append(record)
        self._log.total_time += record.actual_duration
        self._meetings[:] = [m for m in self._meetings if m.id != meeting.id]

        logger.info(
            "meeting completed",
            meeting_id=meeting.id,
            planned=record.planned_duration,
            actual=record.actual_duration,
            efficiency=record.efficiency,
        )
        return record

    def kpis(self) -> KPISummary:
        """KPIs over the current log."""
        return compute_kpis(self._log.completed_meetings)
