"""Pytest configuration and shared fixtures."""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from events import models
from events.domain import (
    CommissionRate,
    Event,
    EventId,
    Money,
    Organization,
    Registration,
    RegistrationState,
)

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def organization_snapshot() -> Organization:
    return Organization(
        id=1,
        name="Acme Events",
        commission=CommissionRate(Decimal("0.95")),
        max_event_length_hours=72,
    )


@pytest.fixture
def build_event(organization_snapshot):
    """Factory for valid domain event snapshots; keyword arguments override fields."""

    def build(**overrides) -> Event:
        event = Event(
            id=EventId(uuid.uuid4()),
            slug="launch-party",
            name="Launch Party",
            location="Online",
            organization=organization_snapshot,
            time_start=NOW + timedelta(days=30),
            time_end=NOW + timedelta(days=30, hours=3),
            timezone="UTC",
            currency="USD",
        )
        return replace(event, **overrides)

    return build


@pytest.fixture
def build_registration():
    def build(price="10.00", **overrides) -> Registration:
        fields = dict(
            id=None,
            user_id=1,
            price=Money.of(price),
            status=RegistrationState.DONE,
            created_at=NOW,
        )
        fields.update(overrides)
        return Registration(**fields)

    return build


@pytest.fixture
def organiser(db):
    return get_user_model().objects.create_user(
        username="organiser", email="organiser@example.com", password="secret-pass-1"
    )


@pytest.fixture
def organization(db, organiser):
    org = models.Organization.objects.create(
        name="Acme Events", commission=Decimal("0.95"), max_event_length_hours=72
    )
    org.users.add(organiser)
    return org


@pytest.fixture
def make_event(organization):
    def make(**overrides) -> models.Event:
        start = overrides.pop("time_start", datetime.now(timezone.utc) + timedelta(days=30))
        fields = dict(
            organization=organization,
            name="Launch Party",
            location="Online",
            time_start=start,
            time_end=start + timedelta(hours=3),
        )
        fields.update(overrides)
        return models.Event.objects.create(**fields)

    return make


@pytest.fixture
def make_attendee(db):
    counter = iter(range(1, 10_000))

    def make(event: models.Event, price="10.00", **overrides) -> models.Registration:
        n = next(counter)
        user = get_user_model().objects.create_user(
            username=f"attendee{n}", email=f"attendee{n}@example.com", password="x"
        )
        return models.Registration.objects.create(
            event=event, user=user, price=Decimal(price), **overrides
        )

    return make
