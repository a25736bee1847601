"""Domain errors raised by the timekeeping core.

All of these are recoverable: the caller reports them and the
in-memory state is left as it was before the failing call.
"""

from enum import Enum


class TimekeeperError(Exception):
    """Base class for all timekeeper errors."""


class ValidationErrorKind(str, Enum):
    """Reasons an intent can be rejected before any mutation."""

    EMPTY_TITLE = "EmptyTitle"
    PAST_OR_INVALID_DATE = "PastOrInvalidDate"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"


class ValidationError(TimekeeperError):
    """Raised when user input is rejected."""

    def __init__(self, kind: ValidationErrorKind, message: str | None = None):
        self.kind = kind
        super().__init__(message or kind.value)


class NotFoundError(TimekeeperError):
    """Raised for an unknown meeting or template id."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class PersistenceError(TimekeeperError):
    """Raised when the storage backend cannot be reached or fails."""


class TimerStateError(TimekeeperError):
    """Raised for a timer transition that is not valid in the current state."""
