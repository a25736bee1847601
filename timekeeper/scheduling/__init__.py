"""Meeting scheduling and background jobs."""

from timekeeper.scheduling.dates import parse_meeting_datetime
from timekeeper.scheduling.scheduler import MeetingScheduler

__all__ = [
    "MeetingScheduler",
    "parse_meeting_datetime",
]
