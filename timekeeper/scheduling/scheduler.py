"""MeetingScheduler: validates input and builds Meeting records.

Agenda resolution precedence:
1. An existing template: its agenda and duration are copied verbatim
2. Free-text agenda: parsed against a fixed 30-minute target, and the
   meeting total becomes the sum of the parsed items
3. Neither: a single "Meeting discussion" item of the default meeting
   duration (30 minutes unless configured)
"""

from datetime import UTC, datetime

import structlog

from timekeeper.agenda.catalog import TemplateCatalog
from timekeeper.agenda.parser import (
    DEFAULT_TARGET_MINUTES,
    FALLBACK_TITLE,
    agenda_total,
    parse_agenda_items,
)
from timekeeper.config import settings
from timekeeper.errors import NotFoundError, ValidationError, ValidationErrorKind
from timekeeper.models.agenda import AgendaItem, Template
from timekeeper.models.base import new_id
from timekeeper.models.meeting import Meeting, MeetingStatus
from timekeeper.scheduling.dates import parse_meeting_datetime

logger = structlog.get_logger()


def _snapshot(template: Template) -> list[AgendaItem]:
    return [item.model_copy() for item in template.agenda]


class MeetingScheduler:
    """Creates meetings from user input and templates.

    Pure with respect to application state: returns new Meeting objects
    and never touches templates or other meetings.
    """

    def __init__(self, catalog: TemplateCatalog, default_duration: int | None = None):
        """Initialize scheduler.

        Args:
            catalog: Template source for template-based scheduling
            default_duration: Minutes for a meeting with no agenda.
                              Defaults to settings.
        """
        self._catalog = catalog
        self._default_duration = default_duration or settings.default_meeting_duration

    def schedule(
        self,
        title: str | None,
        date_time: datetime | str | None,
        template_id: str | None = None,
        agenda_text: str | None = None,
        now: datetime | None = None,
    ) -> Meeting:
        """Build a scheduled meeting.

        Args:
            title: Meeting title
            date_time: When the meeting starts; must be strictly in the future
            template_id: Optional template to copy the agenda from
            agenda_text: Optional free-text agenda (ignored if template resolves)
            now: Current time override

        Returns:
            New Meeting with status ``scheduled``

        Raises:
            ValidationError: EmptyTitle, MissingRequiredField or PastOrInvalidDate
        """
        now = now or datetime.now(UTC)

        if not title or not title.strip():
            raise ValidationError(
                ValidationErrorKind.EMPTY_TITLE, "Meeting title is required"
            )
        if date_time is None or (isinstance(date_time, str) and not date_time.strip()):
            raise ValidationError(
                ValidationErrorKind.MISSING_REQUIRED_FIELD,
                "Meeting date and time are required",
            )

        when = parse_meeting_datetime(date_time, now=now)
        if when is None or when <= now:
            raise ValidationError(
                ValidationErrorKind.PAST_OR_INVALID_DATE,
                "Meeting must be scheduled in the future",
            )

        template = self._catalog.get(template_id)
        if template is not None:
            agenda = _snapshot(template)
            total_duration = template.total_duration
        elif agenda_text and agenda_text.strip():
            # Parsed against the default target; the meeting reports whatever
            # the items add up to.
            agenda = parse_agenda_items(agenda_text, DEFAULT_TARGET_MINUTES)
            total_duration = agenda_total(agenda)
        else:
            total_duration = self._default_duration
            agenda = [AgendaItem(title=FALLBACK_TITLE, duration=total_duration)]

        meeting = Meeting(
            id=new_id("meeting"),
            title=title.strip(),
            date_time=when,
            template_id=template_id or None,
            status=MeetingStatus.SCHEDULED,
            agenda=agenda,
            total_duration=total_duration,
            created_at=now,
        )
        logger.info(
            "meeting scheduled",
            meeting_id=meeting.id,
            date_time=when.isoformat(),
            total_duration=total_duration,
        )
        return meeting

    def use_template(self, template_id: str, now: datetime | None = None) -> Meeting:
        """Build an immediately active meeting from a template.

        Skips the future-date check since the meeting starts right away.

        Raises:
            NotFoundError: If the template does not exist
        """
        template = self._catalog.get(template_id)
        if template is None:
            raise NotFoundError("Template", template_id)

        now = now or datetime.now(UTC)
        return Meeting(
            id=new_id("meeting"),
            title=template.name,
            date_time=now,
            template_id=template.id,
            status=MeetingStatus.ACTIVE,
            agenda=_snapshot(template),
            total_duration=template.total_duration,
            created_at=now,
        )
