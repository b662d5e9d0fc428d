from django.urls import path

from events.handlers import (
    DashboardView,
    EventDetailView,
    PublishView,
    ReportView,
    SummaryView,
)

urlpatterns = [
    path(
        "organisers/events/<str:event_id>",
        EventDetailView.as_view(),
        name="organiser-event-detail",
    ),
    path(
        "organisers/events/<str:event_id>/dashboard",
        DashboardView.as_view(),
        name="organiser-event-dashboard",
    ),
    path(
        "organisers/events/<str:event_id>/summary",
        SummaryView.as_view(),
        name="organiser-event-summary",
    ),
    path(
        "organisers/events/<str:event_id>/publish",
        PublishView.as_view(),
        name="organiser-event-publish",
    ),
    path(
        "organisers/events/<str:event_id>/reports/<str:kind>",
        ReportView.as_view(),
        name="organiser-event-report",
    ),
]
