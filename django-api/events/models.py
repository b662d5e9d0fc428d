"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in events/domain/.
Every child row is owned by its event and deleted with it.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify

from events.domain.value_objects import DEFAULT_SLUG, Slug


class Organization(models.Model):
    """Persistence model for organizations owning events."""

    name = models.CharField(max_length=255)
    commission = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=1,
        validators=[MinValueValidator(0), MaxValueValidator(1)],
    )
    max_event_length_hours = models.PositiveIntegerField(default=72)
    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL, blank=True, related_name="organizations"
    )

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        DRAFT = "draft"
        LIVE = "live"

    class AttendeesVisibility(models.TextChoices):
        SHOW_ALL = "show_all"
        SHOW_LIST = "show_list"
        SHOW_NONE = "show_none"

    class LocationPreference(models.TextChoices):
        RANDOM = "random"
        NEAREST = "nearest"

    class RegistrationStatus(models.TextChoices):
        OPEN = "open"
        WAITLISTING = "waitlisting"
        INVITE_ONLY = "invite_only"

    class EventType(models.TextChoices):
        PUBLIC = "public"
        PRIVATE = "private"
        HIDDEN = "hidden"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="events"
    )
    slug = models.SlugField(max_length=255, unique=True)
    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    short_description = models.CharField(max_length=255, blank=True, null=True)
    message = models.TextField(blank=True, null=True)
    theme = models.TextField(blank=True, null=True)
    color = models.CharField(max_length=7, blank=True, null=True)
    picture_url = models.URLField(max_length=500, blank=True, null=True)
    password = models.CharField(max_length=128, blank=True, null=True)
    time_start = models.DateTimeField(null=True)
    time_end = models.DateTimeField(null=True)
    timezone = models.CharField(max_length=64, default="UTC")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.DRAFT)
    attendees_visibility = models.CharField(
        max_length=16,
        choices=AttendeesVisibility.choices,
        default=AttendeesVisibility.SHOW_ALL,
    )
    location_preference = models.CharField(
        max_length=16,
        choices=LocationPreference.choices,
        default=LocationPreference.RANDOM,
        null=True,
        blank=True,
    )
    registration_status = models.CharField(
        max_length=16,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.OPEN,
    )
    event_type = models.CharField(
        max_length=16, choices=EventType.choices, default=EventType.PUBLIC
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default="USD")
    suppress_emails = models.BooleanField(default=False)
    embed_ticket_success_url = models.CharField(max_length=500, blank=True, null=True)
    embed_ticket_error_url = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["time_start"]
        indexes = [
            models.Index(fields=["status", "time_end"]),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(self.name, exclude_pk=self.pk)
        super().save(*args, **kwargs)


def unique_slug(text: str, exclude_pk=None) -> str:
    """Slug for `text` that no other event uses, suffixed -2, -3... on collision."""
    base = Slug(slugify(text or "") or DEFAULT_SLUG)
    taken = Event.objects.exclude(pk=exclude_pk)
    candidate, n = base, 1
    while taken.filter(slug=candidate.value).exists():
        n += 1
        candidate = base.with_suffix(n)
    return candidate.value


class EventPart(models.Model):
    """A structural segment of an event."""

    class PartType(models.TextChoices):
        STAGE = "stage"
        NETWORKING = "networking"
        SESSIONS = "sessions"
        EXPO = "expo"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_parts")
    name = models.CharField(max_length=255)
    event_part_type = models.CharField(max_length=16, choices=PartType.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.event.name} - {self.name}"


class Schedule(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="schedules")
    event_part = models.ForeignKey(
        EventPart, on_delete=models.CASCADE, related_name="schedules"
    )
    time_start = models.DateTimeField()
    time_end = models.DateTimeField()

    class Meta:
        ordering = ["time_start"]

    def __str__(self) -> str:
        return f"{self.event_part.name} - {self.time_start}"


class Backstage(models.Model):
    """Production area of a stage; one primary backstage per part."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="backstages")
    event_part = models.ForeignKey(
        EventPart, on_delete=models.CASCADE, related_name="backstages"
    )
    uuid = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    name = models.CharField(max_length=255)
    is_primary = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event_part"],
                condition=models.Q(is_primary=True),
                name="one_primary_backstage_per_part",
            )
        ]

    def __str__(self) -> str:
        return self.name


class Persona(models.Model):
    """A ticket type offered for an event."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="personas")
    label = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    count = models.PositiveIntegerField(default=0)
    visible = models.BooleanField(default=True)

    def __str__(self) -> str:
        return f"{self.label} - {self.price}"


class Discount(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="discounts")
    value = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    active = models.BooleanField(default=True)


class Sponsor(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="sponsors")
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    about = models.TextField(blank=True)

    def __str__(self) -> str:
        return self.name


class EventAffiliate(models.Model):
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="event_affiliates"
    )
    code = models.CharField(max_length=64)

    def __str__(self) -> str:
        return self.code


class RegistrationField(models.Model):
    """Extra question asked when registering."""

    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="registration_fields"
    )
    label = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]


class Registration(models.Model):
    """Persistence model for registrations."""

    class Status(models.TextChoices):
        DONE = "done"
        WAITLISTED = "waitlisted"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations"
    )
    persona = models.ForeignKey(
        Persona,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="registrations",
    )
    event_affiliate = models.ForeignKey(
        EventAffiliate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="registrations",
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    charge_id = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.DONE)
    refunded = models.BooleanField(default=False)
    participated = models.BooleanField(default=False)
    extra_fields = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event", "status", "refunded"]),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.event.name}"


class Report(models.Model):
    """A report requested by an organiser, generated in the background."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="reports")
    kind = models.CharField(max_length=32)
    params = models.JSONField(default=dict)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} - {self.event.name}"


class EventLocale(models.Model):
    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="locale")
    custom_text_json = models.JSONField(null=True, blank=True)


class EventExtra(models.Model):
    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="extra")
    invite_to_video_call = models.BooleanField(default=False)
