"""Completion records and analytics aggregates."""

from datetime import datetime

from pydantic import Field

from timekeeper.models.base import CamelModel, utc_now


class CompletionRecord(CamelModel):
    """Outcome of one finished meeting. Append-only."""

    meeting_id: str
    title: str
    planned_duration: int = Field(ge=0, description="Planned minutes")
    actual_duration: int = Field(ge=0, description="Elapsed minutes, rounded up")
    efficiency: int = Field(ge=0, description="planned / actual as a percent")
    completed_at: datetime = Field(default_factory=utc_now)
    template_id: str | None = None

    @property
    def on_time(self) -> bool:
        """Finished within the planned time."""
        return self.efficiency >= 100


class AnalyticsLog(CamelModel):
    """Completion log plus the running total of meeting minutes."""

    completed_meetings: list[CompletionRecord] = Field(default_factory=list)
    total_time: int = Field(default=0, ge=0)


class KPISummary(CamelModel):
    """Aggregate KPIs derived from the completion log."""

    total_meetings: int = 0
    avg_efficiency: int = 0
    time_saved_minutes: int = 0
    on_time_rate_percent: int = 0


class UserSettings(CamelModel):
    """Per-installation preferences kept in the local snapshot."""

    theme: str = "light"
    sound_enabled: bool = True
