"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores, job queue, analytics)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from decimal import Decimal

from django.utils.text import slugify

from events.domain import (
    Event,
    EventId,
    EventPart,
    EventStatus,
    EventType,
    Money,
    Registration,
    RegistrationPolicy,
    RegistrationState,
)
from events.domain.completion import create_event_percentage, is_not_complete
from events.domain.errors import (
    EventAlreadyStartedError,
    EventNotDeletableError,
    EventNotFoundError,
    EventValidationError,
    FailureCode,
    InvalidEventIdError,
    NoRegistrationsError,
    PublishInPastError,
    RegistrationClosedError,
    ValidationFailure,
)
from events.domain.financials import FinancialCalculator, SalesSummary
from events.domain.models import AttendeesVisibility, LocationPreference
from events.domain.validation import ValidationProfile, validate
from events.domain.value_objects import DEFAULT_SLUG
from events.services.analytics import AnalyticsGateway
from events.services.jobs import RESCHEDULE_EVENT_EMAILS, TIME_START_CHANGED, JobQueue
from events.services.reports import ReportKind, build_report_params
from events.stores.interfaces import EventStore, RegistrationScope

logger = logging.getLogger(__name__)

WEEK = timedelta(weeks=1)

# Changeable attributes; enum-typed ones are parsed from their string values.
UPDATABLE_FIELDS = {
    "name": None,
    "slug": None,
    "location": None,
    "description": None,
    "short_description": None,
    "message": None,
    "theme": None,
    "color": None,
    "picture_url": None,
    "password": None,
    "time_start": None,
    "time_end": None,
    "timezone": None,
    "currency": None,
    "suppress_emails": None,
    "embed_ticket_success_url": None,
    "embed_ticket_error_url": None,
    "price": Money.of,
    "attendees_visibility": AttendeesVisibility,
    "location_preference": LocationPreference,
    "registration_policy": RegistrationPolicy,
    "event_type": EventType,
}


@dataclass(frozen=True)
class DashboardStats:
    registrations: int
    tickets_sold: dict[str, int]
    current_week_registrations: int
    last_week_registrations: int
    registrations_increase_percent: float
    ticket_sales: Decimal
    current_week_ticket_sales: Decimal
    last_week_ticket_sales: Decimal
    ticket_sales_increase_percent: float
    stage_part: EventPart | None
    sales: SalesSummary
    completion_percentage: float
    not_complete: bool


@dataclass(frozen=True)
class EventSummary:
    registrations: int
    registrations_per_week: dict[date, int]
    registration_price_sum: Decimal
    sales_per_day: dict[date, Decimal]
    tickets_sold: dict[str, int]
    turnout: int
    total_reports_count: int


def percentage_increase(current, before) -> float:
    """Growth relative to the current period, 0 when nothing happened now."""
    if current == 0:
        return 0
    return float((Decimal(current) - Decimal(before)) / Decimal(current) * 100)


def _week_start(moment: datetime) -> date:
    day = moment.date()
    return day - timedelta(days=day.weekday())


class EventService:
    """Service for organiser event operations."""

    def __init__(
        self, store: EventStore, jobs: JobQueue, analytics: AnalyticsGateway
    ) -> None:
        self._store = store
        self._jobs = jobs
        self._analytics = analytics

    def _parse_id(self, event_id) -> EventId:
        if isinstance(event_id, EventId):
            return event_id
        try:
            return EventId.from_string(event_id)
        except (TypeError, ValueError):
            raise InvalidEventIdError() from None

    def get_event(self, event_id) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = self._parse_id(event_id)
        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def is_organiser(self, event_id, user_id: int) -> bool:
        return self._store.is_organiser(self._parse_id(event_id), user_id)

    def validate(
        self, event_id, profile: ValidationProfile = ValidationProfile.DEFAULT
    ) -> list[ValidationFailure]:
        return validate(self.get_event(event_id), profile)

    def update_event(
        self,
        event_id,
        changes: dict,
        profile: ValidationProfile = ValidationProfile.DEFAULT,
        actor: int | None = None,
        now: datetime | None = None,
    ) -> Event:
        """Apply changes to an event and save it if it stays valid.

        Raises:
            EventAlreadyStartedError: If the start of a running event changes.
            EventValidationError: With every failure, when the result is invalid.
        """
        now = now or datetime.now().astimezone()
        event = self.get_event(event_id)
        parsed = self._coerce(changes)

        start_changed = "time_start" in parsed and parsed["time_start"] != event.time_start
        if start_changed and event.started(now):
            raise EventAlreadyStartedError()

        if "slug" in parsed:
            parsed["slug"] = slugify(parsed["slug"] or "") or DEFAULT_SLUG
        updated = replace(event, **parsed)

        failures = validate(updated, profile)
        if updated.slug != event.slug and self._store.slug_exists(updated.slug, exclude=event.id):
            failures.append(
                ValidationFailure("slug", FailureCode.TAKEN, "has already been taken")
            )
        if failures:
            raise EventValidationError(failures)

        saved = self._store.save_event(updated)
        logger.info("Event %s updated (%s) by %s", saved.id, ", ".join(sorted(parsed)), actor)
        self._after_update(event, saved, now)
        return saved

    def _coerce(self, changes: dict) -> dict:
        parsed = {}
        for name, value in changes.items():
            if name not in UPDATABLE_FIELDS:
                raise ValueError(f"Event field cannot be updated: {name}")
            convert = UPDATABLE_FIELDS[name]
            parsed[name] = convert(value) if convert and value is not None else value
        return parsed

    def _after_update(self, before: Event, after: Event, now: datetime) -> None:
        if after.time_end != before.time_end:
            for registration in self._store.ledger(after.id).entries():
                self._analytics.track(registration.user_id, "Time End Changed", after)
        if after.time_start != before.time_start and not after.suppress_emails:
            self._jobs.enqueue(TIME_START_CHANGED, None, {"event_id": str(after.id)})
        if before.suppress_emails and not after.suppress_emails and not after.finished(now):
            self._jobs.enqueue(RESCHEDULE_EVENT_EMAILS, None, {"event_id": str(after.id)})

    def toggle_publish(self, event_id, actor: int | None, now: datetime | None = None) -> Event:
        """Put a draft event live, or take a live event back to draft.

        Raises:
            PublishInPastError: If a draft event starts or ends in the past.
            EventValidationError: If the event may not change state.
        """
        now = now or datetime.now().astimezone()
        event = self.get_event(event_id)

        match event.status:
            case EventStatus.DRAFT:
                if event.time_start and event.time_end and (
                    event.time_start < now or event.time_end < now
                ):
                    raise PublishInPastError()
                target = replace(event, status=EventStatus.LIVE)
                failures = validate(target, ValidationProfile.DEFAULT)
            case EventStatus.LIVE:
                target = replace(event, status=EventStatus.DRAFT)
                failures = validate(target, ValidationProfile.PUBLISH)

        if failures:
            raise EventValidationError(failures)

        saved = self._store.save_event(target)
        logger.info("Event %s marked as %s by %s", saved.id, saved.status.value, actor)
        if saved.status is EventStatus.LIVE:
            self._analytics.track(actor, "Publish Event", saved)
        return saved

    def destroy_event(self, event_id) -> None:
        """Delete an event and everything it owns.

        Raises:
            EventNotDeletableError: If anyone is registered.
        """
        event = self.get_event(event_id)
        if not event.valid_for_deletion:
            raise EventNotDeletableError()
        self._store.delete_event(event.id)
        logger.info("Event %s removed", event.id)

    def register_user(
        self,
        event_id,
        user_id: int,
        price,
        charge_id: str | None = None,
        persona_id: int | None = None,
        status: RegistrationState | None = None,
        affiliate_id: int | None = None,
        extra_fields: dict | None = None,
    ) -> Registration:
        """Register a user, defaulting the status from the registration policy.

        Raises:
            RegistrationClosedError: If no status is given for an invite-only event.
        """
        event = self.get_event(event_id)
        status = status or event.default_registration_state
        if status is None:
            raise RegistrationClosedError()
        return self._store.ledger(event.id).register_user(
            user_id,
            Money.of(price).amount,
            charge_id,
            persona_id,
            status,
            affiliate_id=affiliate_id,
            extra_fields=extra_fields,
        )

    def unregister_user(self, event_id, user_id: int) -> int:
        event = self.get_event(event_id)
        return self._store.ledger(event.id).unregister_user(user_id)

    def sales(self, event_id) -> SalesSummary:
        event = self.get_event(event_id)
        ledger = self._store.ledger(event.id)
        return FinancialCalculator(ledger, event.organization.commission).summary()

    def dashboard(self, event_id, now: datetime | None = None) -> DashboardStats:
        now = now or datetime.now().astimezone()
        event = self.get_event(event_id)
        ledger = self._store.ledger(event.id)
        entries = ledger.entries(RegistrationScope.CONFIRMED)

        week_ago, two_weeks_ago = now - WEEK, now - 2 * WEEK
        current_week = [r for r in entries if r.created_at and r.created_at >= week_ago]
        last_week = [
            r for r in entries if r.created_at and two_weeks_ago <= r.created_at < week_ago
        ]
        current_sales = sum((r.price.amount for r in current_week), Decimal("0"))
        last_sales = sum((r.price.amount for r in last_week), Decimal("0"))
        sales = FinancialCalculator(ledger, event.organization.commission).summary()

        return DashboardStats(
            registrations=len(entries),
            tickets_sold=self._tickets_sold(entries),
            current_week_registrations=len(current_week),
            last_week_registrations=len(last_week),
            registrations_increase_percent=percentage_increase(
                len(current_week), len(last_week)
            ),
            ticket_sales=sales.ticket_sales,
            current_week_ticket_sales=current_sales,
            last_week_ticket_sales=last_sales,
            ticket_sales_increase_percent=percentage_increase(current_sales, last_sales),
            stage_part=event.stage_part,
            sales=sales,
            completion_percentage=create_event_percentage(event),
            not_complete=is_not_complete(event),
        )

    def summary(self, event_id) -> EventSummary:
        """Return post-event figures.

        Raises:
            NoRegistrationsError: If nobody registered.
        """
        event = self.get_event(event_id)
        entries = self._store.ledger(event.id).entries(RegistrationScope.CONFIRMED)
        if not entries:
            raise NoRegistrationsError()

        per_week: dict[date, int] = Counter()
        per_day: dict[date, Decimal] = defaultdict(Decimal)
        for registration in entries:
            if registration.created_at is None:
                continue
            per_week[_week_start(registration.created_at)] += 1
            per_day[registration.created_at.date()] += registration.price.amount

        return EventSummary(
            registrations=len(entries),
            registrations_per_week=dict(sorted(per_week.items())),
            registration_price_sum=sum((r.price.amount for r in entries), Decimal("0")),
            sales_per_day=dict(sorted(per_day.items())),
            tickets_sold=self._tickets_sold(entries),
            turnout=sum(1 for r in entries if r.participated),
            total_reports_count=self._store.report_count(event.id),
        )

    @staticmethod
    def _tickets_sold(entries: list[Registration]) -> dict[str, int]:
        return dict(Counter(r.persona_label for r in entries if r.persona_label))

    def request_report(
        self, event_id, kind: str, actor: int | None, options: dict | None = None
    ) -> dict:
        """Queue a report and return the parameters handed to the job.

        Raises:
            UnknownReportError: If the report kind is not supported.
        """
        report_kind = ReportKind.parse(kind)
        event = self.get_event(event_id)
        params = build_report_params(
            report_kind,
            event.id,
            options,
            with_extra_fields=self._store.has_registration_fields(event.id),
        )
        self._jobs.enqueue(report_kind.value, actor, params)
        return params
