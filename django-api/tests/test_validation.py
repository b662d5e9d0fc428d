"""Unit tests for event validation.

Run with: pytest tests/test_validation.py -v
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from events.domain import EventStatus, EventType, Schedule
from events.domain.errors import FailureCode
from events.domain.validation import ValidationProfile, can_transition, validate

LONG_TEXT = "Welcome everyone, grab a coffee and say hello to your neighbours."


def fields(failures):
    return [f.field for f in failures]


class TestBaseRules:
    """Rules that apply under every validation profile."""

    def test_valid_event_has_no_failures(self, build_event):
        assert validate(build_event()) == []

    @pytest.mark.parametrize("field", ["name", "location", "currency", "timezone"])
    def test_required_text_fields(self, build_event, field):
        failures = validate(build_event(**{field: "  "}))
        assert fields(failures) == [field]
        assert failures[0].code is FailureCode.REQUIRED

    def test_location_preference_required(self, build_event):
        assert fields(validate(build_event(location_preference=None))) == ["location_preference"]

    def test_failures_are_collected_not_fail_fast(self, build_event):
        failures = validate(build_event(name="", location="", theme="nope"))
        assert fields(failures) == ["name", "location", "theme"]


class TestDateRange:
    def test_start_must_precede_end(self, build_event, now):
        failures = validate(build_event(time_start=now, time_end=now))
        assert fields(failures) == ["time_end"]
        assert failures[0].code is FailureCode.DATE_RANGE

    @pytest.mark.parametrize("hours", [-5, -1, 0])
    def test_fails_iff_start_not_before_end(self, build_event, now, hours):
        event = build_event(time_start=now, time_end=now + timedelta(hours=hours))
        assert "time_end" in fields(validate(event))

    def test_result_is_independent_of_other_fields(self, build_event, now):
        bad_dates = dict(time_start=now, time_end=now - timedelta(hours=1))
        failures = validate(build_event(name="", **bad_dates))
        assert fields(failures) == ["name", "time_end"]

    def test_each_missing_bound_reports_itself(self, build_event):
        failures = validate(build_event(time_start=None, time_end=None))
        assert fields(failures) == ["time_start", "time_end"]
        assert all(f.message == "must be selected" for f in failures)


class TestMaxEventLength:
    def test_duration_at_limit_is_valid(self, build_event, now):
        event = build_event(time_start=now, time_end=now + timedelta(hours=72))
        assert validate(event) == []

    def test_duration_over_limit_names_limit(self, build_event, now):
        event = build_event(time_start=now, time_end=now + timedelta(hours=72, seconds=1))
        failures = validate(event)
        assert fields(failures) == ["event"]
        assert failures[0].code is FailureCode.MAX_LENGTH_EXCEEDED
        assert "72" in failures[0].message


class TestPassword:
    def test_private_event_needs_password(self, build_event):
        assert fields(validate(build_event(event_type=EventType.PRIVATE))) == ["password"]

    def test_private_event_with_password(self, build_event):
        assert validate(build_event(event_type=EventType.PRIVATE, password="s3cret")) == []

    def test_public_event_needs_no_password(self, build_event):
        assert validate(build_event(event_type=EventType.HIDDEN)) == []


class TestFormats:
    def test_short_description_limit(self, build_event):
        assert validate(build_event(short_description="x" * 120)) == []
        failures = validate(build_event(short_description="x" * 121))
        assert failures[0].message == "120 characters is the maximum allowed"

    @pytest.mark.parametrize("color", ["#fff", "A0B1C2", "#a0b1c2"])
    def test_valid_colors(self, build_event, color):
        assert validate(build_event(color=color)) == []

    @pytest.mark.parametrize("color", ["#ffff", "red", "#12345g"])
    def test_invalid_colors(self, build_event, color):
        assert fields(validate(build_event(color=color))) == ["color"]

    def test_embed_urls_must_be_http(self, build_event):
        failures = validate(
            build_event(
                embed_ticket_success_url="https://example.com/ok",
                embed_ticket_error_url="example.com/error",
            )
        )
        assert fields(failures) == ["embed_ticket_error_url"]

    @pytest.mark.parametrize("zone", ["Europe/Berlin", "America/New_York", "UTC"])
    def test_known_time_zones(self, build_event, zone):
        assert validate(build_event(timezone=zone)) == []

    @pytest.mark.parametrize("zone", ["Mars/Olympus", "../etc/passwd"])
    def test_unknown_time_zone(self, build_event, zone):
        failures = validate(build_event(timezone=zone))
        assert fields(failures) == ["timezone"]
        assert failures[0].code is FailureCode.INVALID_FORMAT


class TestTheme:
    @pytest.mark.parametrize("theme", [None, "", "   "])
    def test_blank_theme_is_valid(self, build_event, theme):
        assert validate(build_event(theme=theme)) == []

    def test_json_theme_is_valid(self, build_event):
        assert validate(build_event(theme='{"a":1}')) == []

    def test_malformed_theme_yields_one_failure(self, build_event):
        failures = validate(build_event(theme="not json"))
        assert len(failures) == 1
        assert failures[0].field == "theme"
        assert failures[0].code is FailureCode.MALFORMED_THEME

    def test_deeply_nested_theme_is_a_failure_not_a_crash(self, build_event):
        failures = validate(build_event(theme="[" * 100000))
        assert fields(failures) == ["theme"]
        assert failures[0].code is FailureCode.MALFORMED_THEME


class TestSchedules:
    def test_schedule_must_end_after_start(self, build_event, now):
        schedules = (
            Schedule(id=1, event_part_id=1, time_start=now, time_end=now + timedelta(hours=1)),
            Schedule(id=2, event_part_id=1, time_start=now, time_end=now),
        )
        assert fields(validate(build_event(schedules=schedules))) == ["schedules"]


class TestProfiles:
    """Rules selected by the caller's validation profile."""

    def test_registration_requires_description(self, build_event):
        failures = validate(build_event(), ValidationProfile.REGISTRATION)
        assert fields(failures) == ["description"]
        assert failures[0].code is FailureCode.REQUIRED

    def test_registration_description_minimum_length(self, build_event):
        failures = validate(build_event(description="Too short"), ValidationProfile.REGISTRATION)
        assert failures[0].code is FailureCode.TOO_SHORT

    def test_registration_with_long_description(self, build_event):
        event = build_event(description=LONG_TEXT)
        assert validate(event, ValidationProfile.REGISTRATION) == []

    def test_reception_form_requires_message(self, build_event):
        failures = validate(build_event(description=LONG_TEXT), ValidationProfile.RECEPTION_FORM)
        assert fields(failures) == ["message"]

    def test_reception_form_message_minimum_length(self, build_event):
        failures = validate(build_event(message="Hi"), ValidationProfile.RECEPTION_FORM)
        assert failures[0].code is FailureCode.TOO_SHORT

    def test_profiles_do_not_leak(self, build_event):
        """The default profile ignores description and message."""
        assert validate(build_event(description="", message=""), ValidationProfile.DEFAULT) == []


class TestPublishTransition:
    def test_unpublish_without_registrations(self, build_event):
        event = build_event(status=EventStatus.DRAFT)
        assert validate(event, ValidationProfile.PUBLISH) == []

    def test_unpublish_with_registrations_is_denied(self, build_event):
        event = build_event(status=EventStatus.DRAFT, confirmed_registrations=1)
        failures = validate(event, ValidationProfile.PUBLISH)
        assert fields(failures) == ["status"]
        assert failures[0].code is FailureCode.TRANSITION_DENIED
        assert failures[0].message == "Cannot unpublish event with registrations"

    def test_round_trip_without_registrations(self, build_event):
        draft = build_event()
        live = replace(draft, status=EventStatus.LIVE)
        assert validate(live, ValidationProfile.PUBLISH) == []
        back = replace(live, status=EventStatus.DRAFT)
        assert validate(back, ValidationProfile.PUBLISH) == []

    def test_can_transition(self, build_event):
        event = build_event(status=EventStatus.LIVE, confirmed_registrations=3)
        assert can_transition(event, EventStatus.LIVE)
        assert not can_transition(event, EventStatus.DRAFT)
        assert can_transition(replace(event, confirmed_registrations=0), EventStatus.DRAFT)
