"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    EVENT_INVALID = "EVENT_INVALID"
    EVENT_ALREADY_STARTED = "EVENT_ALREADY_STARTED"
    PUBLISH_IN_PAST = "PUBLISH_IN_PAST"
    EVENT_NOT_DELETABLE = "EVENT_NOT_DELETABLE"
    NO_REGISTRATIONS = "NO_REGISTRATIONS"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    UNKNOWN_REPORT = "UNKNOWN_REPORT"


class FailureCode(Enum):
    """Kinds of field-scoped validation failures."""

    REQUIRED = "REQUIRED"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    INVALID_FORMAT = "INVALID_FORMAT"
    DATE_RANGE = "DATE_RANGE"
    MAX_LENGTH_EXCEEDED = "MAX_LENGTH_EXCEEDED"
    MALFORMED_THEME = "MALFORMED_THEME"
    TRANSITION_DENIED = "TRANSITION_DENIED"
    TAKEN = "TAKEN"


@dataclass(frozen=True)
class ValidationFailure:
    """A user-correctable problem with one field. Returned, never raised."""

    field: str
    code: FailureCode
    message: str

    def __str__(self) -> str:
        return f"{self.field} {self.message}"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        object.__setattr__(self, "event_id", event_id)


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class EventValidationError(DomainError):
    """Raised by the service when a change would leave the event invalid."""

    def __init__(self, failures) -> None:
        failures = tuple(failures)
        object.__setattr__(self, "code", ErrorCode.EVENT_INVALID)
        object.__setattr__(self, "message", ", ".join(str(f) for f in failures))
        object.__setattr__(self, "failures", failures)


class EventAlreadyStartedError(DomainError):
    """Raised when the start time of a running event is changed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_ALREADY_STARTED,
            message="Event is already started, can not change start time.",
        )


class PublishInPastError(DomainError):
    """Raised when publishing an event whose dates already passed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PUBLISH_IN_PAST,
            message="Start date or End date can not be in past",
        )


class EventNotDeletableError(DomainError):
    """Raised when deleting an event that still has registrations."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_DELETABLE,
            message="Cannot delete an event with registrations",
        )


class NoRegistrationsError(DomainError):
    """Raised when a summary is requested for an event nobody registered to."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_REGISTRATIONS,
            message="No summary for this event since no-one registered to it.",
        )


class RegistrationClosedError(DomainError):
    """Raised when registering without a status on an invite-only event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_CLOSED,
            message="Event registration is invite only",
        )


class UnknownReportError(DomainError):
    """Raised when an unsupported report kind is requested."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_REPORT,
            message=f"Unknown report: {kind}",
        )
