"""How far an organiser is through setting up an event.

The checklist is picked by event shape. Every shape currently shares the same
checklist.
"""

from enum import Enum
from typing import Callable

from events.domain.models import Event, EventPartType

NOT_COMPLETE_THRESHOLD = 90


class EventShape(Enum):
    MEETINGS_ONLY = "meetings_only"
    CONFERENCE_ONLY = "conference_only"
    NO_PARTS = "no_parts"
    MIXED = "mixed"


def classify_shape(event: Event) -> EventShape:
    has_stage = event.has_part(EventPartType.STAGE)
    has_networking = event.has_part(EventPartType.NETWORKING)
    if has_networking and not has_stage:
        return EventShape.MEETINGS_ONLY
    if has_stage and not has_networking:
        return EventShape.CONFERENCE_ONLY
    if not has_stage and not has_networking:
        return EventShape.NO_PARTS
    return EventShape.MIXED


def has_registration_area(event: Event) -> bool:
    return bool(event.description) and bool(event.picture_url)


def has_tickets(event: Event) -> bool:
    return len(event.personas) >= 1


def has_reception_area(event: Event) -> bool:
    return event.message is not None


Check = Callable[[Event], bool]

_DEFAULT_CHECKLIST: tuple[Check, ...] = (
    has_registration_area,
    has_reception_area,
    has_tickets,
)

CHECKLISTS: dict[EventShape, tuple[Check, ...]] = {
    EventShape.MEETINGS_ONLY: _DEFAULT_CHECKLIST,
    EventShape.CONFERENCE_ONLY: _DEFAULT_CHECKLIST,
    EventShape.NO_PARTS: _DEFAULT_CHECKLIST,
    EventShape.MIXED: _DEFAULT_CHECKLIST,
}


def create_event_percentage(event: Event) -> float:
    # 100 - satisfied share: a fully configured event scores 0.
    steps = CHECKLISTS[classify_shape(event)]
    complete = [step for step in steps if step(event)]
    return 100 - (len(complete) / len(steps) * 100)


def is_not_complete(event: Event) -> bool:
    return create_event_percentage(event) > NOT_COMPLETE_THRESHOLD
