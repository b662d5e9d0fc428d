"""In-memory stores, used where no database is wanted."""

import itertools
import operator
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from events.domain import Event, EventId, Money, Registration, RegistrationState
from events.stores.interfaces import EventStore, RegistrationLedger, RegistrationScope

_OPERATORS = {
    "exact": operator.eq,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "in": lambda value, options: value in options,
}


def _field_value(registration: Registration, name: str):
    value = getattr(registration, name)
    return value.amount if isinstance(value, Money) else value


def _matches(registration: Registration, lookups: dict) -> bool:
    for key, expected in lookups.items():
        name, _, op = key.partition("__")
        if op not in _OPERATORS and op != "":
            raise ValueError(f"Unsupported lookup: {key}")
        compare = _OPERATORS[op or "exact"]
        if not compare(_field_value(registration, name), expected):
            return False
    return True


def _in_scope(registration: Registration, scope: RegistrationScope) -> bool:
    match scope:
        case RegistrationScope.CONFIRMED:
            return registration.confirmed
        case RegistrationScope.WAITLISTED:
            return (
                registration.status is RegistrationState.WAITLISTED
                and not registration.refunded
            )
        case RegistrationScope.ALL:
            return True


class InMemoryRegistrationLedger(RegistrationLedger):
    """List-backed ledger for one event."""

    def __init__(self, registrations=()) -> None:
        self._registrations: list[Registration] = list(registrations)
        self._ids = itertools.count(len(self._registrations) + 1)

    def _scoped(self, scope: RegistrationScope) -> list[Registration]:
        return [r for r in self._registrations if _in_scope(r, scope)]

    def count(self, scope: RegistrationScope = RegistrationScope.CONFIRMED) -> int:
        return len(self._scoped(scope))

    def sum(
        self, field: str, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> Decimal:
        return sum(
            (Decimal(_field_value(r, field)) for r in self._scoped(scope)),
            Decimal("0"),
        )

    def count_where(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED, **lookups
    ) -> int:
        return sum(1 for r in self._scoped(scope) if _matches(r, lookups))

    def entries(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> list[Registration]:
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(self._scoped(scope), key=lambda r: r.created_at or epoch)

    def register_user(
        self,
        user_id: int,
        price: Decimal,
        charge_id: str | None,
        persona_id: int | None,
        status: RegistrationState,
        affiliate_id: int | None = None,
        extra_fields: dict | None = None,
    ) -> Registration:
        registration = Registration(
            id=next(self._ids),
            user_id=user_id,
            price=Money.of(price),
            status=status,
            charge_id=charge_id,
            persona_id=persona_id,
            affiliate_id=affiliate_id,
            created_at=datetime.now(timezone.utc),
            extra_fields=dict(extra_fields or {}),
        )
        self._registrations.append(registration)
        return registration

    def unregister_user(self, user_id: int) -> int:
        kept = [r for r in self._registrations if r.user_id != user_id]
        removed = len(self._registrations) - len(kept)
        self._registrations = kept
        return removed

    def is_attending(self, user_id: int) -> bool:
        return any(r.user_id == user_id for r in self._scoped(RegistrationScope.CONFIRMED))

    def is_waitlisted(self, user_id: int) -> bool:
        return any(r.user_id == user_id for r in self._scoped(RegistrationScope.WAITLISTED))


class InMemoryEventStore(EventStore):
    """Dict-backed event store keeping one ledger per event."""

    def __init__(self) -> None:
        self._events: dict[EventId, Event] = {}
        self._ledgers: dict[EventId, InMemoryRegistrationLedger] = {}
        self._organisers: dict[EventId, set[int]] = {}
        self._reports: dict[EventId, int] = {}
        self._registration_fields: dict[EventId, list[str]] = {}

    def add(
        self, event: Event, organiser_ids=(), registrations=(), registration_fields=()
    ) -> Event:
        self._registration_fields[event.id] = list(registration_fields)
        self._events[event.id] = event
        self._ledgers[event.id] = InMemoryRegistrationLedger(registrations)
        self._organisers[event.id] = set(organiser_ids)
        return self.get_event(event.id)

    def get_event(self, event_id: EventId) -> Event | None:
        event = self._events.get(event_id)
        if event is None:
            return None
        return replace(
            event, confirmed_registrations=self._ledgers[event_id].count()
        )

    def event_exists(self, event_id: EventId) -> bool:
        return event_id in self._events

    def save_event(self, event: Event) -> Event:
        self._events[event.id] = event
        return self.get_event(event.id)

    def delete_event(self, event_id: EventId) -> None:
        self._events.pop(event_id, None)
        self._ledgers.pop(event_id, None)
        self._organisers.pop(event_id, None)
        self._reports.pop(event_id, None)
        self._registration_fields.pop(event_id, None)

    def slug_exists(self, slug: str, exclude: EventId | None = None) -> bool:
        return any(
            e.slug == slug for eid, e in self._events.items() if eid != exclude
        )

    def ledger(self, event_id: EventId) -> InMemoryRegistrationLedger:
        return self._ledgers[event_id]

    def is_organiser(self, event_id: EventId, user_id: int) -> bool:
        return user_id in self._organisers.get(event_id, set())

    def record_report(self, event_id: EventId) -> None:
        self._reports[event_id] = self._reports.get(event_id, 0) + 1

    def report_count(self, event_id: EventId) -> int:
        return self._reports.get(event_id, 0)

    def has_registration_fields(self, event_id: EventId) -> bool:
        return bool(self._registration_fields.get(event_id))
