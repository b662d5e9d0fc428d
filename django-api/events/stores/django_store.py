"""Django ORM implementation of the EventStore and RegistrationLedger."""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from events import models
from events.domain import (
    Capacity,
    CommissionRate,
    Discount,
    Event,
    EventId,
    EventPart,
    EventPartType,
    EventStatus,
    EventType,
    Money,
    Organization,
    Persona,
    Registration,
    RegistrationPolicy,
    RegistrationState,
    Schedule,
)
from events.domain.models import AttendeesVisibility, LocationPreference
from events.stores.interfaces import EventStore, RegistrationLedger, RegistrationScope

logger = logging.getLogger(__name__)

# Event attributes copied verbatim between the row and the snapshot.
PLAIN_FIELDS = (
    "slug",
    "name",
    "location",
    "description",
    "short_description",
    "message",
    "theme",
    "color",
    "picture_url",
    "password",
    "time_start",
    "time_end",
    "timezone",
    "currency",
    "suppress_emails",
    "embed_ticket_success_url",
    "embed_ticket_error_url",
)


def _to_registration(row: models.Registration) -> Registration:
    return Registration(
        id=row.id,
        user_id=row.user_id,
        price=Money(row.price),
        status=RegistrationState(row.status),
        refunded=row.refunded,
        persona_id=row.persona_id,
        persona_label=row.persona.label if row.persona_id else None,
        charge_id=row.charge_id,
        affiliate_id=row.event_affiliate_id,
        participated=row.participated,
        created_at=row.created_at,
        extra_fields=row.extra_fields or {},
    )


def _to_organization(row: models.Organization) -> Organization:
    return Organization(
        id=row.id,
        name=row.name,
        commission=CommissionRate(row.commission),
        max_event_length_hours=row.max_event_length_hours,
    )


class DjangoRegistrationLedger(RegistrationLedger):
    """Registrations of one event, queried with the Django ORM."""

    def __init__(self, event_pk) -> None:
        self._event_pk = event_pk

    def _scoped(self, scope: RegistrationScope):
        rows = models.Registration.objects.filter(event_id=self._event_pk)
        match scope:
            case RegistrationScope.CONFIRMED:
                return rows.filter(status=models.Registration.Status.DONE, refunded=False)
            case RegistrationScope.WAITLISTED:
                return rows.filter(
                    status=models.Registration.Status.WAITLISTED, refunded=False
                )
            case RegistrationScope.ALL:
                return rows

    def count(self, scope: RegistrationScope = RegistrationScope.CONFIRMED) -> int:
        return self._scoped(scope).count()

    def sum(
        self, field: str, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> Decimal:
        total = self._scoped(scope).aggregate(total=Sum(field))["total"]
        return Decimal(total or 0)

    def count_where(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED, **lookups
    ) -> int:
        return self._scoped(scope).filter(**lookups).count()

    def entries(
        self, scope: RegistrationScope = RegistrationScope.CONFIRMED
    ) -> list[Registration]:
        rows = self._scoped(scope).select_related("persona").order_by("created_at")
        return [_to_registration(row) for row in rows]

    @transaction.atomic
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
        row = models.Registration.objects.create(
            event_id=self._event_pk,
            user_id=user_id,
            price=price,
            charge_id=charge_id,
            persona_id=persona_id,
            status=status.value,
            event_affiliate_id=affiliate_id,
            extra_fields=extra_fields or {},
        )
        logger.info(
            "Registered user %s to event %s (%s)", user_id, self._event_pk, status.value
        )
        return _to_registration(row)

    @transaction.atomic
    def unregister_user(self, user_id: int) -> int:
        removed, _ = models.Registration.objects.filter(
            event_id=self._event_pk, user_id=user_id
        ).delete()
        logger.info("Unregistered user %s from event %s", user_id, self._event_pk)
        return removed

    def is_attending(self, user_id: int) -> bool:
        return self._scoped(RegistrationScope.CONFIRMED).filter(user_id=user_id).exists()

    def is_waitlisted(self, user_id: int) -> bool:
        return self._scoped(RegistrationScope.WAITLISTED).filter(user_id=user_id).exists()


class DjangoEventStore(EventStore):
    """Database-backed event store using Django ORM."""

    def _to_domain(self, row: models.Event) -> Event:
        return Event(
            id=EventId(row.id),
            organization=_to_organization(row.organization),
            status=EventStatus(row.status),
            price=Money(row.price),
            attendees_visibility=AttendeesVisibility(row.attendees_visibility),
            location_preference=(
                LocationPreference(row.location_preference)
                if row.location_preference
                else None
            ),
            registration_policy=RegistrationPolicy(row.registration_status),
            event_type=EventType(row.event_type),
            parts=tuple(
                EventPart(id=p.id, name=p.name, part_type=EventPartType(p.event_part_type))
                for p in row.event_parts.all()
            ),
            schedules=tuple(
                Schedule(
                    id=s.id,
                    event_part_id=s.event_part_id,
                    time_start=s.time_start,
                    time_end=s.time_end,
                )
                for s in row.schedules.all()
            ),
            personas=tuple(
                Persona(
                    id=p.id,
                    label=p.label,
                    price=Money(p.price),
                    capacity=Capacity(p.count),
                    visible=p.visible,
                )
                for p in row.personas.all()
            ),
            discounts=tuple(
                Discount(value=d.value, active=d.active) for d in row.discounts.all()
            ),
            confirmed_registrations=DjangoRegistrationLedger(row.pk).count(),
            **{name: getattr(row, name) for name in PLAIN_FIELDS},
        )

    def _fetch(self, event_id: EventId) -> models.Event | None:
        return (
            models.Event.objects.select_related("organization")
            .prefetch_related("event_parts", "schedules", "personas", "discounts")
            .filter(pk=event_id.value)
            .first()
        )

    def get_event(self, event_id: EventId) -> Event | None:
        row = self._fetch(event_id)
        return self._to_domain(row) if row else None

    def event_exists(self, event_id: EventId) -> bool:
        return models.Event.objects.filter(pk=event_id.value).exists()

    def save_event(self, event: Event) -> Event:
        row = models.Event.objects.get(pk=event.id.value)
        for name in PLAIN_FIELDS:
            setattr(row, name, getattr(event, name))
        row.status = event.status.value
        row.price = event.price.amount
        row.attendees_visibility = event.attendees_visibility.value
        row.location_preference = (
            event.location_preference.value if event.location_preference else None
        )
        row.registration_status = event.registration_policy.value
        row.event_type = event.event_type.value
        row.save()
        logger.info("Saved event %s", event.id)
        return self.get_event(event.id)

    @transaction.atomic
    def delete_event(self, event_id: EventId) -> None:
        deleted, per_model = models.Event.objects.filter(pk=event_id.value).delete()
        logger.info("Deleted event %s with %s owned rows: %s", event_id, deleted, per_model)

    def slug_exists(self, slug: str, exclude: EventId | None = None) -> bool:
        rows = models.Event.objects.filter(slug=slug)
        if exclude is not None:
            rows = rows.exclude(pk=exclude.value)
        return rows.exists()

    def ledger(self, event_id: EventId) -> DjangoRegistrationLedger:
        return DjangoRegistrationLedger(event_id.value)

    def is_organiser(self, event_id: EventId, user_id: int) -> bool:
        return models.Organization.objects.filter(
            events__pk=event_id.value, users__pk=user_id
        ).exists()

    def report_count(self, event_id: EventId) -> int:
        return models.Report.objects.filter(event_id=event_id.value).count()

    def has_registration_fields(self, event_id: EventId) -> bool:
        return models.RegistrationField.objects.filter(event_id=event_id.value).exists()
