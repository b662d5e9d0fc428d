"""Django signals creating the rows every event owns from the start."""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from events.models import Event, EventExtra, EventLocale

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Event)
def ensure_event_children(sender, instance, created, **kwargs):
    """Give a new event its extra settings and locale rows."""
    if not created:
        return
    EventExtra.objects.get_or_create(event=instance)
    EventLocale.objects.get_or_create(event=instance)
    logger.debug("Created extra and locale for event %s", instance.pk)
