from django.contrib import admin

from events.models import (
    Discount,
    Event,
    EventPart,
    Organization,
    Persona,
    Registration,
    Report,
    Schedule,
    Sponsor,
)


class EventPartInline(admin.TabularInline):
    model = EventPart
    extra = 1


class ScheduleInline(admin.TabularInline):
    model = Schedule
    extra = 1


class PersonaInline(admin.TabularInline):
    model = Persona
    extra = 1


class DiscountInline(admin.TabularInline):
    model = Discount
    extra = 0


class SponsorInline(admin.TabularInline):
    model = Sponsor
    extra = 0


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ["name", "commission", "max_event_length_hours"]
    search_fields = ["name"]
    filter_horizontal = ["users"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "organization", "status", "time_start", "time_end"]
    list_filter = ["status", "event_type", "registration_status"]
    search_fields = ["name", "location", "slug"]
    inlines = [EventPartInline, ScheduleInline, PersonaInline, DiscountInline, SponsorInline]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["user", "event", "persona", "price", "status", "refunded"]
    list_filter = ["status", "refunded", "event"]


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ["kind", "event", "requested_by", "created_at"]
    list_filter = ["kind"]
