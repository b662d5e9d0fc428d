"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from events.domain.value_objects import Capacity, CommissionRate, EventId, Money

STARTING_SOON_WINDOW = timedelta(minutes=5)
EARLY_BIRD_WINDOW = timedelta(days=10)


class EventStatus(Enum):
    DRAFT = "draft"
    LIVE = "live"


class AttendeesVisibility(Enum):
    SHOW_ALL = "show_all"
    SHOW_LIST = "show_list"
    SHOW_NONE = "show_none"


class LocationPreference(Enum):
    RANDOM = "random"
    NEAREST = "nearest"


class RegistrationPolicy(Enum):
    OPEN = "open"
    WAITLISTING = "waitlisting"
    INVITE_ONLY = "invite_only"


class EventType(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    HIDDEN = "hidden"


class EventPartType(Enum):
    STAGE = "stage"
    NETWORKING = "networking"
    SESSIONS = "sessions"
    EXPO = "expo"


class RegistrationState(Enum):
    DONE = "done"
    WAITLISTED = "waitlisted"


@dataclass(frozen=True)
class Organization:
    """The account that owns events and sets their commercial limits."""

    id: int
    name: str
    commission: CommissionRate
    max_event_length_hours: int


@dataclass(frozen=True)
class EventPart:
    id: int
    name: str
    part_type: EventPartType


@dataclass(frozen=True)
class Schedule:
    id: int | None
    event_part_id: int | None
    time_start: datetime | None
    time_end: datetime | None


@dataclass(frozen=True)
class Persona:
    """A ticket type offered for an event."""

    id: int
    label: str
    price: Money
    capacity: Capacity
    visible: bool = True


@dataclass(frozen=True)
class Discount:
    value: Decimal
    active: bool


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration."""

    id: int | None
    user_id: int
    price: Money
    status: RegistrationState
    refunded: bool = False
    persona_id: int | None = None
    persona_label: str | None = None
    charge_id: str | None = None
    affiliate_id: int | None = None
    participated: bool = False
    created_at: datetime | None = None
    extra_fields: dict = field(default_factory=dict)

    @property
    def confirmed(self) -> bool:
        """Only non-refunded, done registrations count as attendance."""
        return self.status is RegistrationState.DONE and not self.refunded


@dataclass(frozen=True)
class Event:
    """Snapshot of an event and the structural facts rules depend on."""

    id: EventId | None
    slug: str
    name: str
    location: str
    organization: Organization
    time_start: datetime | None
    time_end: datetime | None
    timezone: str
    currency: str
    status: EventStatus = EventStatus.DRAFT
    description: str | None = None
    short_description: str | None = None
    message: str | None = None
    theme: str | None = None
    color: str | None = None
    picture_url: str | None = None
    password: str | None = None
    price: Money = Money(Decimal("0"))
    attendees_visibility: AttendeesVisibility = AttendeesVisibility.SHOW_ALL
    location_preference: LocationPreference | None = LocationPreference.RANDOM
    registration_policy: RegistrationPolicy = RegistrationPolicy.OPEN
    event_type: EventType = EventType.PUBLIC
    suppress_emails: bool = False
    embed_ticket_success_url: str | None = None
    embed_ticket_error_url: str | None = None
    parts: tuple[EventPart, ...] = ()
    schedules: tuple[Schedule, ...] = ()
    personas: tuple[Persona, ...] = ()
    discounts: tuple[Discount, ...] = ()
    confirmed_registrations: int = 0

    @property
    def total_time(self) -> float:
        """Duration in seconds, 0 when either bound is missing."""
        if self.time_start is None or self.time_end is None:
            return 0
        return (self.time_end - self.time_start).total_seconds()

    def parts_of(self, part_type: EventPartType) -> list[EventPart]:
        return [part for part in self.parts if part.part_type is part_type]

    def has_part(self, part_type: EventPartType) -> bool:
        return bool(self.parts_of(part_type))

    @property
    def stage_part(self) -> EventPart | None:
        stages = self.parts_of(EventPartType.STAGE)
        return stages[0] if stages else None

    @property
    def active_discounts(self) -> list[Discount]:
        return [d for d in self.discounts if d.active]

    @property
    def free(self) -> bool:
        return self.price.amount == 0

    @property
    def password_protected(self) -> bool:
        return self.event_type is EventType.PRIVATE and bool(self.password)

    @property
    def valid_for_deletion(self) -> bool:
        return self.confirmed_registrations <= 0

    @property
    def default_registration_state(self) -> RegistrationState | None:
        match self.registration_policy:
            case RegistrationPolicy.OPEN:
                return RegistrationState.DONE
            case RegistrationPolicy.WAITLISTING:
                return RegistrationState.WAITLISTED
            case RegistrationPolicy.INVITE_ONLY:
                return None

    def price_range(self) -> tuple[Decimal, Decimal]:
        """Cheapest and most expensive visible ticket, (0, 0) without tickets."""
        prices = [p.price.amount for p in self.personas if p.visible]
        if not prices:
            return Decimal("0"), Decimal("0")
        return min(prices), max(prices)

    def started(self, now: datetime) -> bool:
        return (
            self.status is EventStatus.LIVE
            and self.time_start is not None
            and now > self.time_start
        )

    def finished(self, now: datetime) -> bool:
        return self.time_end is not None and now > self.time_end

    def starting_now(self, now: datetime) -> bool:
        if self.time_start is None or self.time_end is None:
            return False
        return self.time_start - STARTING_SOON_WINDOW <= now <= self.time_end

    def early_bird_period(self, now: datetime) -> bool:
        return self.time_start is not None and now < self.time_start - EARLY_BIRD_WINDOW
