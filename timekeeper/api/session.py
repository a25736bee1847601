"""Session endpoints: the controller's intent surface.

A UI renders ``GET /session/state`` and calls the intent endpoints;
notifications are polled from ``GET /session/events``.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import AliasChoices, Field

from timekeeper.controller import StateSnapshot, Timekeeper, TimerView
from timekeeper.errors import (
    NotFoundError,
    PersistenceError,
    TimerStateError,
    ValidationError,
)
from timekeeper.models.agenda import Template
from timekeeper.models.analytics import CompletionRecord, KPISummary, UserSettings
from timekeeper.models.base import CamelModel
from timekeeper.models.meeting import Meeting

router = APIRouter(prefix="/session", tags=["session"])

T = TypeVar("T")


class ScheduleMeetingRequest(CamelModel):
    """Request body for scheduling a meeting."""

    title: str | None = Field(default=None, description="Meeting title")
    date_time: str | None = Field(
        default=None, description="ISO timestamp or natural language"
    )
    template_id: str | None = Field(default=None)
    agenda_text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("agendaText", "agenda_text", "agenda"),
    )


class TemplateRequest(CamelModel):
    """Request body for creating or editing a template."""

    name: str = Field(default="", description="Template name")
    total_duration: int = Field(
        default=0,
        validation_alias=AliasChoices("totalDuration", "total_duration", "duration"),
    )
    agenda_text: str = Field(
        default="",
        validation_alias=AliasChoices("agendaText", "agenda_text", "agenda"),
    )


class SnoozeRequest(CamelModel):
    """Request body for snoozing the timer."""

    extra_seconds: int | None = Field(default=None, gt=0)


class SettingsRequest(CamelModel):
    """Request body for changing preferences."""

    theme: str | None = None
    sound_enabled: bool | None = None


def get_timekeeper(request: Request) -> Timekeeper:
    """Dependency to get the Timekeeper controller from app state."""
    if not hasattr(request.app.state, "timekeeper"):
        raise HTTPException(status_code=503, detail="Timekeeper not initialized")
    return request.app.state.timekeeper


async def _call(intent: Callable[[], Awaitable[T] | T]) -> T:
    """Run an intent, mapping domain errors onto HTTP status codes."""
    try:
        result = intent()
        if inspect.isawaitable(result):
            result = await result
        return result
    except ValidationError as e:
        raise HTTPException(
            status_code=400, detail={"kind": e.kind.value, "message": str(e)}
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TimerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/state", response_model=StateSnapshot)
async def get_state(tk: Timekeeper = Depends(get_timekeeper)) -> StateSnapshot:
    """Everything needed to render the application."""
    return tk.snapshot()


@router.get("/events")
async def get_events(
    limit: int = Query(default=20, ge=1, le=100),
    tk: Timekeeper = Depends(get_timekeeper),
) -> list[dict]:
    """Most recent notifications, oldest first."""
    return [event.to_message() for event in tk.event_bus.recent(limit)]


@router.get("/kpis", response_model=KPISummary)
async def get_kpis(tk: Timekeeper = Depends(get_timekeeper)) -> KPISummary:
    """Aggregate KPIs over completed meetings."""
    return tk.kpis()


@router.post("/meetings", status_code=201, response_model=Meeting)
async def schedule_meeting(
    body: ScheduleMeetingRequest,
    tk: Timekeeper = Depends(get_timekeeper),
) -> Meeting:
    """Schedule a meeting in the future."""
    return await _call(
        lambda: tk.schedule_meeting(
            body.title, body.date_time, body.template_id, body.agenda_text
        )
    )


@router.delete("/meetings/{meeting_id}", status_code=204)
async def delete_meeting(
    meeting_id: str,
    tk: Timekeeper = Depends(get_timekeeper),
) -> Response:
    """Delete a scheduled meeting."""
    await _call(lambda: tk.delete_meeting(meeting_id))
    return Response(status_code=204)


@router.post("/templates", status_code=201, response_model=Template)
async def create_template(
    body: TemplateRequest,
    tk: Timekeeper = Depends(get_timekeeper),
) -> Template:
    """Create a template from free-text agenda."""
    return await _call(
        lambda: tk.create_template(body.name, body.total_duration, body.agenda_text)
    )


@router.put("/templates/{template_id}", response_model=Template)
async def update_template(
    template_id: str,
    body: TemplateRequest,
    tk: Timekeeper = Depends(get_timekeeper),
) -> Template:
    """Edit a template; its agenda is parsed again."""
    return await _call(
        lambda: tk.update_template(
            template_id, body.name, body.total_duration, body.agenda_text
        )
    )


@router.delete("/templates/{template_id}", status_code=204)
async def delete_template(
    template_id: str,
    tk: Timekeeper = Depends(get_timekeeper),
) -> Response:
    """Delete a template."""
    removed = await _call(lambda: tk.delete_template(template_id))
    if not removed:
        raise HTTPException(status_code=404, detail="Template not found")
    return Response(status_code=204)


@router.post("/templates/{template_id}/use", response_model=TimerView)
async def use_template(
    template_id: str,
    tk: Timekeeper = Depends(get_timekeeper),
) -> TimerView:
    """Start a meeting from a template right now."""
    await _call(lambda: tk.use_template(template_id))
    return tk.timer_view()


@router.post("/timer/start/{meeting_id}", response_model=TimerView)
async def start_timer(
    meeting_id: str,
    tk: Timekeeper = Depends(get_timekeeper),
) -> TimerView:
    """Start the countdown for a meeting."""
    await _call(lambda: tk.start_meeting(meeting_id))
    return tk.timer_view()


@router.post("/timer/pause", response_model=TimerView)
async def pause_timer(tk: Timekeeper = Depends(get_timekeeper)) -> TimerView:
    """Pause the countdown."""
    await _call(tk.pause)
    return tk.timer_view()


@router.post("/timer/resume", response_model=TimerView)
async def resume_timer(tk: Timekeeper = Depends(get_timekeeper)) -> TimerView:
    """Resume the countdown."""
    await _call(tk.resume)
    return tk.timer_view()


@router.post("/timer/stop", response_model=TimerView)
async def stop_timer(tk: Timekeeper = Depends(get_timekeeper)) -> TimerView:
    """Stop the countdown; the meeting then awaits snooze or finish."""
    await _call(tk.stop)
    return tk.timer_view()


@router.post("/timer/snooze", response_model=TimerView)
async def snooze_timer(
    body: SnoozeRequest | None = None,
    tk: Timekeeper = Depends(get_timekeeper),
) -> TimerView:
    """Add time to a completed or stopped meeting."""
    extra = body.extra_seconds if body else None
    await _call(lambda: tk.snooze(extra))
    return tk.timer_view()


@router.post("/timer/finish", response_model=CompletionRecord)
async def finish_timer(tk: Timekeeper = Depends(get_timekeeper)) -> CompletionRecord:
    """Record the meeting in analytics and end the session."""
    return await _call(tk.finish)


@router.put("/settings", response_model=UserSettings)
async def update_settings(
    body: SettingsRequest,
    tk: Timekeeper = Depends(get_timekeeper),
) -> UserSettings:
    """Change theme or sound preferences."""
    return await _call(lambda: tk.update_settings(body.theme, body.sound_enabled))
