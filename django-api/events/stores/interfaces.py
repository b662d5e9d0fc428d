"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum

from events.domain import Event, EventId, Registration, RegistrationState


class RegistrationScope(Enum):
    """Which registrations of an event a ledger query covers."""

    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    ALL = "all"


class RegistrationLedger(ABC):
    """Registrations of a single event.

    Lookups passed to `count_where` use Django-style keys: `field`,
    `field__gt`, `field__gte`, `field__lt`, `field__lte` and `field__in`.
    """

    @abstractmethod
    def count(self, scope: RegistrationScope = RegistrationScope.CONFIRMED) -> int:
        """Return the number of registrations in scope."""
        ...

    @abstractmethod
    def sum(
        self, field: str, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> Decimal:
        """Return the sum of a numeric field, 0 for an empty scope."""
        ...

    @abstractmethod
    def count_where(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED, **lookups
    ) -> int:
        """Return the number of registrations in scope matching all lookups."""
        ...

    @abstractmethod
    def entries(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> list[Registration]:
        """Return registrations in scope ordered by created_at ascending."""
        ...

    @abstractmethod
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
        """Append a registration; visible to every later query."""
        ...

    @abstractmethod
    def unregister_user(self, user_id: int) -> int:
        """Remove every registration of the user, returning how many went."""
        ...

    @abstractmethod
    def is_attending(self, user_id: int) -> bool:
        """Check if the user holds a confirmed registration."""
        ...

    @abstractmethod
    def is_waitlisted(self, user_id: int) -> bool:
        """Check if the user holds a waitlisted, non-refunded registration."""
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Persist the event's own attributes and return the fresh snapshot."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> None:
        """Delete the event together with every child it owns."""
        ...

    @abstractmethod
    def slug_exists(self, slug: str, exclude: EventId | None = None) -> bool:
        """Check if another event already uses the slug."""
        ...

    @abstractmethod
    def ledger(self, event_id: EventId) -> RegistrationLedger:
        """Return the registration ledger scoped to the event."""
        ...

    @abstractmethod
    def is_organiser(self, event_id: EventId, user_id: int) -> bool:
        """Check if the user belongs to the organization owning the event."""
        ...

    @abstractmethod
    def report_count(self, event_id: EventId) -> int:
        """Return the number of reports generated for the event."""
        ...

    @abstractmethod
    def has_registration_fields(self, event_id: EventId) -> bool:
        """Check if the event asks extra questions at registration."""
        ...
