"""Structural and lifecycle validation for events.

`validate` collects every failure instead of stopping at the first one, so
callers can show the organiser the complete list. Expected violations are
returned as `ValidationFailure` values and never raised.
"""

import json
import re
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from events.domain.errors import FailureCode, ValidationFailure
from events.domain.models import Event, EventStatus, EventType

MIN_TEXT_LENGTH = 30
MAX_SHORT_DESCRIPTION = 120

COLOR_RE = re.compile(r"\A#?(?:[A-F0-9]{3}){1,2}\Z", re.IGNORECASE)
URL_RE = re.compile(r"https?://\S+")


class ValidationProfile(Enum):
    """Named validation modes; a caller picks exactly one per operation."""

    DEFAULT = "default"
    REGISTRATION = "registration"
    RECEPTION_FORM = "reception_form"
    PUBLISH = "publish"


def validate(
    event: Event, profile: ValidationProfile = ValidationProfile.DEFAULT
) -> list[ValidationFailure]:
    failures: list[ValidationFailure] = []
    failures += _presence(event)
    failures += _date_range(event)
    failures += _max_event_length(event)
    failures += _password(event)
    failures += _formats(event)
    failures += _theme(event)
    failures += _schedules(event)

    match profile:
        case ValidationProfile.DEFAULT:
            pass
        case ValidationProfile.REGISTRATION:
            failures += _long_text(event.description, "description")
        case ValidationProfile.RECEPTION_FORM:
            failures += _long_text(event.message, "message")
        case ValidationProfile.PUBLISH:
            failures += _status_transition(event)
    return failures


def can_transition(event: Event, target: EventStatus) -> bool:
    """draft -> live is always allowed; live -> draft only without attendees."""
    match target:
        case EventStatus.LIVE:
            return True
        case EventStatus.DRAFT:
            return event.confirmed_registrations == 0


def known_time_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _required(field: str, message: str = "can't be blank") -> ValidationFailure:
    return ValidationFailure(field, FailureCode.REQUIRED, message)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _presence(event: Event) -> list[ValidationFailure]:
    fields = ("name", "location", "location_preference", "currency", "timezone")
    return [_required(name) for name in fields if _blank(getattr(event, name))]


def _date_range(event: Event) -> list[ValidationFailure]:
    failures = []
    if event.time_start is None:
        failures.append(_required("time_start", "must be selected"))
    if event.time_end is None:
        failures.append(_required("time_end", "must be selected"))
    if failures:
        return failures
    if event.time_start >= event.time_end:
        return [
            ValidationFailure(
                "time_end", FailureCode.DATE_RANGE, "must be later than time start"
            )
        ]
    return []


def _max_event_length(event: Event) -> list[ValidationFailure]:
    limit_hours = event.organization.max_event_length_hours
    if event.total_time > limit_hours * 3600:
        return [
            ValidationFailure(
                "event",
                FailureCode.MAX_LENGTH_EXCEEDED,
                f"cannot be longer than {limit_hours} hours",
            )
        ]
    return []


def _password(event: Event) -> list[ValidationFailure]:
    if event.event_type is EventType.PRIVATE and _blank(event.password):
        return [_required("password")]
    return []


def _formats(event: Event) -> list[ValidationFailure]:
    failures = []
    if event.short_description and len(event.short_description) > MAX_SHORT_DESCRIPTION:
        failures.append(
            ValidationFailure(
                "short_description",
                FailureCode.TOO_LONG,
                f"{MAX_SHORT_DESCRIPTION} characters is the maximum allowed",
            )
        )
    if event.color and not COLOR_RE.match(event.color):
        failures.append(
            ValidationFailure("color", FailureCode.INVALID_FORMAT, "is invalid")
        )
    if not _blank(event.timezone) and not known_time_zone(event.timezone):
        failures.append(
            ValidationFailure(
                "timezone", FailureCode.INVALID_FORMAT, "is not a known time zone"
            )
        )
    for name in ("embed_ticket_success_url", "embed_ticket_error_url"):
        value = getattr(event, name)
        if value and not URL_RE.search(value):
            failures.append(
                ValidationFailure(name, FailureCode.INVALID_FORMAT, "format is invalid")
            )
    return failures


def _theme(event: Event) -> list[ValidationFailure]:
    if _blank(event.theme):
        return []
    try:
        json.loads(event.theme)
    except (ValueError, RecursionError):
        return [
            ValidationFailure("theme", FailureCode.MALFORMED_THEME, "must be valid JSON")
        ]
    return []


def _schedules(event: Event) -> list[ValidationFailure]:
    failures = []
    for schedule in event.schedules:
        if schedule.time_start is None or schedule.time_end is None:
            failures.append(_required("schedules", "must have a start and an end"))
        elif schedule.time_start >= schedule.time_end:
            failures.append(
                ValidationFailure(
                    "schedules", FailureCode.DATE_RANGE, "must end after they start"
                )
            )
    return failures


def _long_text(value: str | None, field: str) -> list[ValidationFailure]:
    if _blank(value):
        return [_required(field)]
    if len(value) < MIN_TEXT_LENGTH:
        return [
            ValidationFailure(
                field,
                FailureCode.TOO_SHORT,
                f"is too short (minimum is {MIN_TEXT_LENGTH} characters)",
            )
        ]
    return []


def _status_transition(event: Event) -> list[ValidationFailure]:
    if event.status is EventStatus.DRAFT and not can_transition(event, EventStatus.DRAFT):
        return [
            ValidationFailure(
                "status",
                FailureCode.TRANSITION_DENIED,
                "Cannot unpublish event with registrations",
            )
        ]
    return []
