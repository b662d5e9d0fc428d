"""Integration tests for the organiser event endpoints.

Run with: pytest tests/test_organiser_api.py -v
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from django.core import mail
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from events import models
from events.handlers.views import REPORT_ENQUEUED


def url(name: str, event, **kwargs) -> str:
    return reverse(name, kwargs={"event_id": str(getattr(event, "pk", event)), **kwargs})


@pytest.fixture
def client(api_client: APIClient, organiser) -> APIClient:
    api_client.force_authenticate(organiser)
    return api_client


@pytest.mark.django_db
class TestEventDetail:
    """Tests for /api/organisers/events/{id}"""

    def test_get_event_returns_details(self, client, make_event):
        """Given event exists, returns event details."""
        event = make_event(price="12.50")
        response = client.get(url("organiser-event-detail", event))
        assert response.status_code == 200
        assert response.data["id"] == str(event.pk)
        assert response.data["slug"] == "launch-party"
        assert response.data["status"] == "draft"
        assert response.data["registration_status"] == "open"
        assert response.data["price"] == "12.50"
        assert response.data["discounted_price"] == "12.50"
        assert response.data["free"] is False

    def test_active_discounts_reduce_the_price(self, client, make_event):
        event = make_event(price="100.00")
        models.Discount.objects.create(event=event, value=Decimal("10"))
        models.Discount.objects.create(event=event, value=Decimal("25"), active=False)
        response = client.get(url("organiser-event-detail", event))
        assert response.data["discounted_price"] == "90.00"

    def test_free_event(self, client, make_event):
        response = client.get(url("organiser-event-detail", make_event()))
        assert response.data["free"] is True
        assert response.data["discounted_price"] == "0.00"

    def test_get_event_not_found(self, client, organization):
        """Given event does not exist, returns 404."""
        response = client.get(url("organiser-event-detail", "8f14e45f-ceea-467f-a0e6-1b7c3b3b6f10"))
        assert response.status_code == 404
        assert response.data["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, client, organization):
        """Given invalid UUID, returns 400."""
        response = client.get(url("organiser-event-detail", "not-a-uuid"))
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_EVENT_ID"

    def test_other_users_are_forbidden(self, api_client, make_event, django_user_model):
        event = make_event()
        stranger = django_user_model.objects.create_user(username="stranger", password="x")
        api_client.force_authenticate(stranger)
        response = api_client.get(url("organiser-event-detail", event))
        assert response.status_code == 403


@pytest.mark.django_db
class TestEventUpdate:
    """Tests for PATCH /api/organisers/events/{id}"""

    def test_update_is_saved(self, client, make_event):
        event = make_event()
        response = client.patch(
            url("organiser-event-detail", event),
            {"name": "Launch Night", "registration_status": "waitlisting"},
            format="json",
        )
        assert response.status_code == 200
        event.refresh_from_db()
        assert event.name == "Launch Night"
        assert event.registration_status == "waitlisting"

    def test_invalid_update_lists_failures(self, client, make_event):
        event = make_event()
        response = client.patch(
            url("organiser-event-detail", event),
            {"name": "", "theme": "not json"},
            format="json",
        )
        assert response.status_code == 422
        assert response.data["code"] == "EVENT_INVALID"
        assert [e["field"] for e in response.data["errors"]] == ["name", "theme"]
        event.refresh_from_db()
        assert event.name == "Launch Party"

    def test_context_selects_rules(self, client, make_event):
        event = make_event()
        response = client.patch(
            url("organiser-event-detail", event) + "?context=registration",
            {"description": "Too short"},
            format="json",
        )
        assert response.status_code == 422
        assert response.data["errors"][0]["code"] == "TOO_SHORT"

    def test_start_change_emails_attendees(self, client, make_event, make_attendee):
        event = make_event()
        make_attendee(event)
        response = client.patch(
            url("organiser-event-detail", event),
            {"time_start": (event.time_start + timedelta(hours=1)).isoformat()},
            format="json",
        )
        assert response.status_code == 200
        assert len(mail.outbox) == 1
        assert "new start time" in mail.outbox[0].subject

    def test_naive_times_are_read_in_requested_zone(self, client, make_event):
        event = make_event()
        response = client.patch(
            url("organiser-event-detail", event),
            {
                "timezone": "Europe/Berlin",
                "time_start": "2030-11-20T18:00:00",
                "time_end": "2030-11-20T20:00:00",
            },
            format="json",
        )
        assert response.status_code == 200
        event.refresh_from_db()
        assert event.time_start == datetime(2030, 11, 20, 17, 0, tzinfo=UTC)
        assert response.data["time_start_local"] == "2030-11-20T18:00:00+01:00"

    def test_naive_times_fall_back_to_event_zone(self, client, make_event):
        event = make_event(timezone="America/New_York")
        response = client.patch(
            url("organiser-event-detail", event),
            {"time_start": "2030-11-20T18:00:00", "time_end": "2030-11-20T20:00:00"},
            format="json",
        )
        assert response.status_code == 200
        event.refresh_from_db()
        assert event.time_start == datetime(2030, 11, 20, 23, 0, tzinfo=UTC)

    def test_times_with_offset_are_kept(self, client, make_event):
        event = make_event(timezone="Europe/Berlin")
        response = client.patch(
            url("organiser-event-detail", event),
            {"time_start": "2030-11-20T18:00:00Z", "time_end": "2030-11-20T20:00:00Z"},
            format="json",
        )
        assert response.status_code == 200
        event.refresh_from_db()
        assert event.time_start == datetime(2030, 11, 20, 18, 0, tzinfo=UTC)

    def test_unknown_time_zone_is_rejected(self, client, make_event):
        event = make_event()
        response = client.patch(
            url("organiser-event-detail", event),
            {"timezone": "Mars/Olympus", "time_start": "2030-11-20T18:00:00"},
            format="json",
        )
        assert response.status_code == 400
        assert "timezone" in response.data
        event.refresh_from_db()
        assert event.timezone == "UTC"


@pytest.mark.django_db
class TestEventDelete:
    def test_delete_event_without_registrations(self, client, make_event):
        event = make_event()
        response = client.delete(url("organiser-event-detail", event))
        assert response.status_code == 204
        assert not models.Event.objects.filter(pk=event.pk).exists()

    def test_delete_event_with_registrations(self, client, make_event, make_attendee):
        event = make_event()
        make_attendee(event)
        response = client.delete(url("organiser-event-detail", event))
        assert response.status_code == 409
        assert response.data["code"] == "EVENT_NOT_DELETABLE"


@pytest.mark.django_db
class TestPublish:
    """Tests for POST /api/organisers/events/{id}/publish"""

    def test_publish_and_unpublish(self, client, make_event):
        event = make_event()
        response = client.post(url("organiser-event-publish", event))
        assert response.status_code == 200
        assert response.data["message"] == "Event successfully marked as live"
        assert response.data["event"]["status"] == "live"

        response = client.post(url("organiser-event-publish", event))
        assert response.data["message"] == "Event successfully marked as draft"

    def test_unpublish_with_registrations(self, client, make_event, make_attendee):
        event = make_event(status="live")
        make_attendee(event)
        response = client.post(url("organiser-event-publish", event))
        assert response.status_code == 422
        assert response.data["errors"][0]["message"] == "Cannot unpublish event with registrations"

    def test_publish_past_event(self, client, make_event):
        event = make_event(time_start=timezone.now() - timedelta(days=2))
        response = client.post(url("organiser-event-publish", event))
        assert response.status_code == 409
        assert response.data["code"] == "PUBLISH_IN_PAST"


@pytest.mark.django_db
class TestDashboardAndSummary:
    def test_dashboard_figures(self, client, make_event, make_attendee):
        event = make_event()
        make_attendee(event, "10.00")
        make_attendee(event, "20.00")
        response = client.get(url("organiser-event-dashboard", event))
        assert response.status_code == 200
        assert response.data["registrations"] == 2
        assert response.data["current_week_registrations"] == 2
        assert response.data["sales"] == {
            "ticket_sales": "30.00",
            "merchant_fees": "1.47",
            "platform_fees": "1.50",
            "net_sales": "27.03",
        }
        assert response.data["stage_part"] is None

    def test_summary_without_registrations(self, client, make_event):
        event = make_event()
        response = client.get(url("organiser-event-summary", event))
        assert response.status_code == 409
        assert response.data["code"] == "NO_REGISTRATIONS"

    def test_summary(self, client, make_event, make_attendee):
        event = make_event()
        make_attendee(event, "10.00", participated=True)
        response = client.get(url("organiser-event-summary", event))
        assert response.status_code == 200
        assert response.data["registrations"] == 1
        assert response.data["registration_price_sum"] == "10.00"
        assert response.data["turnout"] == 1


@pytest.mark.django_db
class TestReports:
    """Tests for POST /api/organisers/events/{id}/reports/{kind}"""

    def test_report_is_queued(self, client, make_event, organiser):
        event = make_event()
        response = client.post(
            url("organiser-event-report", event, kind="participants"),
            {"area": "Sessions 4"},
            format="json",
        )
        assert response.status_code == 202
        assert response.data == {"message": REPORT_ENQUEUED}

        report = models.Report.objects.get(event=event)
        assert report.kind == "participants"
        assert report.requested_by == organiser
        assert report.params["resource_id"] == 4

    def test_unknown_report(self, client, make_event):
        event = make_event()
        response = client.post(url("organiser-event-report", event, kind="finances"))
        assert response.status_code == 404
        assert response.data["code"] == "UNKNOWN_REPORT"
