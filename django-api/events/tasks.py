import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mass_mail
from django.utils import timezone

from .models import Event, Registration, Report

logger = logging.getLogger(__name__)

REMINDER_LEAD_TIME = timedelta(days=1)


def _attendee_emails(event: Event) -> list[str]:
    rows = (
        Registration.objects.filter(
            event=event, status=Registration.Status.DONE, refunded=False
        )
        .exclude(user__email="")
        .values_list("user__email", flat=True)
    )
    return sorted(set(rows))


@shared_task
def generate_report(kind: str, actor_id: int | None, params: dict):
    """
    Record an organiser report request for the report workers.

    Args:
        kind: Report kind, e.g. 'participants' or 'event_chat'
        actor_id: Organiser who asked for the report
        params: Parameter bundle built by the event service
    """
    try:
        event = Event.objects.get(pk=params["event_id"])
    except Event.DoesNotExist:
        logger.warning("Report %s requested for missing event %s", kind, params)
        return None

    report = Report.objects.create(
        event=event, kind=kind, params=params, requested_by_id=actor_id
    )
    logger.info("Report %s queued for event %s (report %s)", kind, event.pk, report.pk)
    return report.pk


@shared_task
def notify_time_start_change(event_id: str):
    """Email confirmed attendees that the event moved."""
    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        logger.warning("Start time changed for missing event %s", event_id)
        return 0

    subject = f"{event.name} has a new start time"
    body = f"{event.name} now starts at {event.time_start:%b %d, %H:%M} ({event.timezone})."
    messages = [
        (subject, body, settings.DEFAULT_FROM_EMAIL, [email])
        for email in _attendee_emails(event)
    ]
    sent = send_mass_mail(messages, fail_silently=False) if messages else 0
    logger.info("Sent %s start time notices for event %s", sent, event_id)
    return sent


@shared_task
def send_event_reminder(event_id: str):
    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        return 0
    if event.suppress_emails:
        logger.info("Emails suppressed for event %s, skipping reminder", event_id)
        return 0

    subject = f"{event.name} starts soon"
    body = f"{event.name} starts at {event.time_start:%b %d, %H:%M} ({event.timezone})."
    messages = [
        (subject, body, settings.DEFAULT_FROM_EMAIL, [email])
        for email in _attendee_emails(event)
    ]
    return send_mass_mail(messages, fail_silently=False) if messages else 0


@shared_task
def reschedule_event_emails(event_id: str):
    """Schedule the attendee reminder again once emails are turned back on."""
    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        logger.warning("Cannot reschedule emails for missing event %s", event_id)
        return None

    eta = max(event.time_start - REMINDER_LEAD_TIME, timezone.now())
    send_event_reminder.apply_async(args=[str(event.pk)], eta=eta)
    logger.info("Rescheduled reminder for event %s at %s", event_id, eta)
    return eta.isoformat()
