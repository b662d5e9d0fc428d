"""Unit tests for event shape classification and setup completion.

Run with: pytest tests/test_completion.py -v
"""

import pytest

from events.domain import Capacity, EventPart, EventPartType, Money, Persona
from events.domain.completion import (
    CHECKLISTS,
    EventShape,
    classify_shape,
    create_event_percentage,
    is_not_complete,
)

STAGE = EventPart(id=1, name="Stage", part_type=EventPartType.STAGE)
NETWORKING = EventPart(id=2, name="Networking", part_type=EventPartType.NETWORKING)
EXPO = EventPart(id=3, name="Expo", part_type=EventPartType.EXPO)
TICKET = Persona(id=1, label="General", price=Money.of("10"), capacity=Capacity(100))


class TestClassifyShape:
    @pytest.mark.parametrize(
        "parts,shape",
        [
            ((NETWORKING,), EventShape.MEETINGS_ONLY),
            ((STAGE,), EventShape.CONFERENCE_ONLY),
            ((), EventShape.NO_PARTS),
            ((EXPO,), EventShape.NO_PARTS),
            ((STAGE, NETWORKING), EventShape.MIXED),
            ((STAGE, NETWORKING, EXPO), EventShape.MIXED),
        ],
    )
    def test_shapes(self, build_event, parts, shape):
        assert classify_shape(build_event(parts=parts)) is shape

    def test_every_shape_shares_the_checklist(self):
        assert set(CHECKLISTS) == set(EventShape)
        assert len({CHECKLISTS[shape] for shape in EventShape}) == 1


class TestCreateEventPercentage:
    def test_bare_event_scores_100(self, build_event):
        event = build_event(message=None)
        assert create_event_percentage(event) == 100
        assert is_not_complete(event)

    def test_fully_configured_event_scores_0(self, build_event):
        event = build_event(
            description="All about the launch",
            picture_url="https://cdn.example.com/launch.png",
            message="Welcome!",
            personas=(TICKET,),
        )
        assert create_event_percentage(event) == 0
        assert not is_not_complete(event)

    def test_registration_area_needs_description_and_picture(self, build_event):
        event = build_event(description="All about the launch", personas=(TICKET,))
        assert create_event_percentage(event) == pytest.approx(100 - 1 / 3 * 100)

    def test_shape_does_not_change_the_score(self, build_event):
        plain = build_event(message="Welcome!")
        staged = build_event(message="Welcome!", parts=(STAGE,))
        assert create_event_percentage(plain) == create_event_percentage(staged)
