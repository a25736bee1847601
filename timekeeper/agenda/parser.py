"""Free-text agenda parsing and time allocation.

One agenda entry per non-blank line. A line such as ``Welcome (5 min)``
is explicitly timed; any other line is untimed and gets an even share
of whatever is left of the target duration, with a 5-minute floor.
"""

import re

from timekeeper.errors import ValidationError, ValidationErrorKind
from timekeeper.models.agenda import AgendaItem

DEFAULT_TARGET_MINUTES = 30
MIN_UNTIMED_MINUTES = 5
FALLBACK_TITLE = "Meeting discussion"

TIMED_LINE = re.compile(r"^(.+?)\s*\((\d+)\s*min\)\s*$", re.IGNORECASE)


def parse_agenda_items(
    text: str | None,
    total_duration: int = DEFAULT_TARGET_MINUTES,
) -> list[AgendaItem]:
    """Turn agenda text into an ordered, time-allocated item list.

    Args:
        text: Multi-line agenda text, one entry per line
        total_duration: Target meeting length in minutes

    Returns:
        Items in input order. Totals may exceed the target when explicit
        durations already do, or when the 5-minute floor kicks in.

    Raises:
        ValidationError: If a timed line asks for zero minutes

    Examples:
        >>> items = parse_agenda_items("Welcome (5 min)\\nDiscussion", 30)
        >>> [(i.title, i.duration) for i in items]
        [('Welcome', 5), ('Discussion', 25)]
    """
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]

    if not lines:
        return [AgendaItem(title=FALLBACK_TITLE, duration=total_duration)]

    # (title, minutes) where None marks an untimed entry
    entries: list[tuple[str, int | None]] = []
    allocated = 0
    for line in lines:
        match = TIMED_LINE.match(line)
        if match:
            minutes = int(match.group(2))
            if minutes < 1:
                raise ValidationError(
                    ValidationErrorKind.MISSING_REQUIRED_FIELD,
                    f"Agenda item needs at least 1 minute: {line}",
                )
            entries.append((match.group(1).strip(), minutes))
            allocated += minutes
        else:
            entries.append((line, None))

    untimed = sum(1 for _, minutes in entries if minutes is None)
    share = 0
    if untimed:
        remaining = max(0, total_duration - allocated)
        share = max(MIN_UNTIMED_MINUTES, remaining // untimed)

    return [
        AgendaItem(title=title, duration=share if minutes is None else minutes)
        for title, minutes in entries
    ]


def agenda_total(items: list[AgendaItem]) -> int:
    """Sum of allocated minutes."""
    return sum(item.duration for item in items)


def describe_agenda(items: list[AgendaItem]) -> str:
    """Display string for a template: item titles, comma-joined."""
    return ", ".join(item.title for item in items)


def format_agenda_text(items: list[AgendaItem]) -> str:
    """Render items back into editable ``<title> (<N> min)`` lines."""
    return "\n".join(f"{item.title} ({item.duration} min)" for item in items)
