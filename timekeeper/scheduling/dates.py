"""Meeting date/time parsing.

Accepts ISO timestamps (as sent by a ``datetime-local`` form field) and
natural language such as "tomorrow 10am", always returning aware UTC.
"""

from datetime import UTC, datetime

import dateparser


def parse_meeting_datetime(
    raw: datetime | str | None,
    now: datetime | None = None,
) -> datetime | None:
    """Convert user input into an aware UTC datetime.

    Args:
        raw: A datetime, an ISO string, or a natural language phrase
        now: Reference point for relative phrases (defaults to current time)

    Returns:
        Parsed datetime, or None if raw is empty or parsing fails

    Examples:
        >>> parse_meeting_datetime("2030-01-18T10:00")
        datetime.datetime(2030, 1, 18, 10, 0, tzinfo=datetime.timezone.utc)
        >>> parse_meeting_datetime("not a date") is None
        True
    """
    if raw is None:
        return None

    if isinstance(raw, datetime):
        parsed: datetime | None = raw
    else:
        if not raw.strip():
            return None
        try:
            parsed = datetime.fromisoformat(raw.strip())
        except ValueError:
            parsed = _parse_natural(raw, now)

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _parse_natural(raw: str, now: datetime | None) -> datetime | None:
    reference = (now or datetime.now(UTC)).astimezone(UTC).replace(tzinfo=None)
    settings: dict = {
        "RELATIVE_BASE": reference,
        "PREFER_DATES_FROM": "future",
        "TIMEZONE": "UTC",
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    try:
        return dateparser.parse(raw, settings=settings)
    except Exception:
        # dateparser can raise various exceptions on malformed input
        return None
