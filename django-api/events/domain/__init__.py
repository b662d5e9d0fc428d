from events.domain.models import (
    Discount,
    Event,
    EventPart,
    EventPartType,
    EventStatus,
    EventType,
    Organization,
    Persona,
    Registration,
    RegistrationPolicy,
    RegistrationState,
    Schedule,
)
from events.domain.value_objects import Capacity, CommissionRate, EventId, Money, Slug

__all__ = [
    "Event",
    "EventPart",
    "EventPartType",
    "EventStatus",
    "EventType",
    "Organization",
    "Persona",
    "Discount",
    "Registration",
    "RegistrationPolicy",
    "RegistrationState",
    "Schedule",
    "EventId",
    "Money",
    "Capacity",
    "CommissionRate",
    "Slug",
]
