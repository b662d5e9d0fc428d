"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain.errors import DomainError, ErrorCode, EventValidationError
from events.handlers.serializers import (
    DashboardSerializer,
    EventSerializer,
    EventUpdateSerializer,
    SummarySerializer,
    UpdateContextSerializer,
    ValidationFailureSerializer,
    input_zone,
)
from events.services.analytics import LoggingAnalyticsGateway
from events.services.event_service import EventService
from events.services.jobs import CeleryJobQueue
from events.stores.django_store import DjangoEventStore

logger = logging.getLogger(__name__)

REPORT_ENQUEUED = "Your report is in the queue, you will receive an email once it is ready."

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_INVALID: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.EVENT_ALREADY_STARTED: status.HTTP_409_CONFLICT,
    ErrorCode.PUBLISH_IN_PAST: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_DELETABLE: status.HTTP_409_CONFLICT,
    ErrorCode.NO_REGISTRATIONS: status.HTTP_409_CONFLICT,
    ErrorCode.REGISTRATION_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.UNKNOWN_REPORT: status.HTTP_404_NOT_FOUND,
}


def get_event_service() -> EventService:
    return EventService(
        store=DjangoEventStore(),
        jobs=CeleryJobQueue(),
        analytics=LoggingAnalyticsGateway(enabled=settings.EVENTS_ANALYTICS_ENABLED),
    )


class OrganiserEventView(APIView):
    """Base handler for endpoints reserved to the event's organisers."""

    permission_classes = [permissions.IsAuthenticated]

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.service = get_event_service()

    def load_event(self, request: Request, event_id: str):
        event = self.service.get_event(event_id)
        if not self.service.is_organiser(event.id, request.user.id):
            raise PermissionDenied("Only organisers of this event can do this.")
        return event

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            body = {"code": exc.code.value, "message": exc.message}
            if isinstance(exc, EventValidationError):
                body["errors"] = ValidationFailureSerializer(exc.failures, many=True).data
            logger.info("Request failed with %s", exc.code.value)
            return Response(body, status=ERROR_STATUS[exc.code])
        return super().handle_exception(exc)


class EventDetailView(OrganiserEventView):
    """Handler for /api/organisers/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        context = UpdateContextSerializer(data=request.query_params)
        context.is_valid(raise_exception=True)
        changes = EventUpdateSerializer(data=request.data, partial=True)
        # Naive times are wall-clock times in the event's zone.
        with timezone.override(input_zone(request.data.get("timezone"), event.timezone)):
            changes.is_valid(raise_exception=True)

        updated = self.service.update_event(
            event.id,
            changes.validated_data,
            profile=context.profile(),
            actor=request.user.id,
        )
        return Response(EventSerializer(updated).data)

    def delete(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        self.service.destroy_event(event.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class DashboardView(OrganiserEventView):
    """Handler for GET /api/organisers/events/{event_id}/dashboard"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        return Response(DashboardSerializer(self.service.dashboard(event.id)).data)


class SummaryView(OrganiserEventView):
    """Handler for GET /api/organisers/events/{event_id}/summary"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        return Response(SummarySerializer(self.service.summary(event.id)).data)


class PublishView(OrganiserEventView):
    """Handler for POST /api/organisers/events/{event_id}/publish"""

    def post(self, request: Request, event_id: str) -> Response:
        event = self.load_event(request, event_id)
        updated = self.service.toggle_publish(event.id, actor=request.user.id)
        return Response(
            {
                "message": f"Event successfully marked as {updated.status.value}",
                "event": EventSerializer(updated).data,
            }
        )


class ReportView(OrganiserEventView):
    """Handler for POST /api/organisers/events/{event_id}/reports/{kind}"""

    def post(self, request: Request, event_id: str, kind: str) -> Response:
        event = self.load_event(request, event_id)
        self.service.request_report(event.id, kind, request.user.id, dict(request.data.items()))
        return Response({"message": REPORT_ENQUEUED}, status=status.HTTP_202_ACCEPTED)
