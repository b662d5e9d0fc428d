"""Serializers for transforming domain models to API responses."""

from zoneinfo import ZoneInfo

from rest_framework import serializers

from events.domain.financials import discounted_price
from events.domain.models import (
    AttendeesVisibility,
    EventType,
    LocationPreference,
    RegistrationPolicy,
)
from events.domain.validation import ValidationProfile, known_time_zone
from events.domain.value_objects import round_cents


class EnumValueField(serializers.Field):
    """Renders an Enum member as its value."""

    def to_representation(self, value):
        return value.value if value is not None else None


def _choices(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def input_zone(requested: str | None, fallback: str | None) -> ZoneInfo:
    """Zone naive input times are read in: the requested one, else the event's."""
    for name in (requested, fallback):
        if name and known_time_zone(name):
            return ZoneInfo(name)
    return ZoneInfo("UTC")


def _local(moment, zone_name: str):
    if moment is None:
        return None
    return moment.astimezone(input_zone(zone_name, None)).isoformat()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    slug = serializers.CharField()
    name = serializers.CharField()
    location = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    short_description = serializers.CharField(allow_null=True)
    message = serializers.CharField(allow_null=True)
    theme = serializers.CharField(allow_null=True)
    color = serializers.CharField(allow_null=True)
    picture_url = serializers.CharField(allow_null=True)
    time_start = serializers.DateTimeField(allow_null=True)
    time_end = serializers.DateTimeField(allow_null=True)
    time_start_local = serializers.SerializerMethodField()
    time_end_local = serializers.SerializerMethodField()
    timezone = serializers.CharField()
    currency = serializers.CharField()
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    discounted_price = serializers.SerializerMethodField()
    free = serializers.BooleanField()
    status = EnumValueField()
    attendees_visibility = EnumValueField()
    location_preference = EnumValueField()
    registration_status = EnumValueField(source="registration_policy")
    event_type = EnumValueField()
    suppress_emails = serializers.BooleanField()
    password_protected = serializers.BooleanField()
    confirmed_registrations = serializers.IntegerField()

    def get_time_start_local(self, event):
        return _local(event.time_start, event.timezone)

    def get_time_end_local(self, event):
        return _local(event.time_end, event.timezone)

    def get_discounted_price(self, event):
        price = discounted_price(event.price.amount, event.active_discounts)
        return str(round_cents(price))


class EventUpdateSerializer(serializers.Serializer):
    """Input accepted when an organiser edits an event. Every field is optional."""

    name = serializers.CharField(required=False, allow_blank=True)
    slug = serializers.CharField(required=False)
    location = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    short_description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    theme = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    picture_url = serializers.URLField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    time_start = serializers.DateTimeField(required=False, allow_null=True)
    time_end = serializers.DateTimeField(required=False, allow_null=True)
    timezone = serializers.CharField(required=False, allow_blank=True)
    currency = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(
        required=False, max_digits=10, decimal_places=2, min_value=0
    )
    suppress_emails = serializers.BooleanField(required=False)
    embed_ticket_success_url = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    embed_ticket_error_url = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    attendees_visibility = serializers.ChoiceField(
        required=False, choices=_choices(AttendeesVisibility)
    )
    location_preference = serializers.ChoiceField(
        required=False, choices=_choices(LocationPreference)
    )
    registration_status = serializers.ChoiceField(
        required=False, source="registration_policy", choices=_choices(RegistrationPolicy)
    )
    event_type = serializers.ChoiceField(required=False, choices=_choices(EventType))

    def validate_timezone(self, value):
        if value and not known_time_zone(value):
            raise serializers.ValidationError(f"Unknown time zone: {value}")
        return value


class UpdateContextSerializer(serializers.Serializer):
    """Query parameters of an event update."""

    context = serializers.ChoiceField(
        required=False,
        choices=[ValidationProfile.REGISTRATION.value, ValidationProfile.RECEPTION_FORM.value],
    )

    def profile(self) -> ValidationProfile:
        context = self.validated_data.get("context")
        return ValidationProfile(context) if context else ValidationProfile.DEFAULT


class ValidationFailureSerializer(serializers.Serializer):
    field = serializers.CharField()
    code = EnumValueField()
    message = serializers.CharField()


class SalesSummarySerializer(serializers.Serializer):
    ticket_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    merchant_fees = serializers.DecimalField(max_digits=12, decimal_places=2)
    platform_fees = serializers.DecimalField(max_digits=12, decimal_places=2)
    net_sales = serializers.DecimalField(max_digits=12, decimal_places=2)


class EventPartSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    part_type = EnumValueField()


class DashboardSerializer(serializers.Serializer):
    registrations = serializers.IntegerField()
    tickets_sold = serializers.DictField(child=serializers.IntegerField())
    current_week_registrations = serializers.IntegerField()
    last_week_registrations = serializers.IntegerField()
    registrations_increase_percent = serializers.FloatField()
    ticket_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    current_week_ticket_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    last_week_ticket_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    ticket_sales_increase_percent = serializers.FloatField()
    stage_part = EventPartSerializer(allow_null=True)
    sales = SalesSummarySerializer()
    completion_percentage = serializers.FloatField()
    not_complete = serializers.BooleanField()


class SummarySerializer(serializers.Serializer):
    registrations = serializers.IntegerField()
    registrations_per_week = serializers.DictField(child=serializers.IntegerField())
    registration_price_sum = serializers.DecimalField(max_digits=12, decimal_places=2)
    sales_per_day = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2)
    )
    tickets_sold = serializers.DictField(child=serializers.IntegerField())
    turnout = serializers.IntegerField()
    total_reports_count = serializers.IntegerField()
