from events.handlers.views import (
    DashboardView,
    EventDetailView,
    PublishView,
    ReportView,
    SummaryView,
)

__all__ = [
    "DashboardView",
    "EventDetailView",
    "PublishView",
    "ReportView",
    "SummaryView",
]
