"""Product analytics for organiser actions."""

import logging
from abc import ABC, abstractmethod

from events.domain import Event

logger = logging.getLogger(__name__)


class AnalyticsGateway(ABC):
    """Interface for fire-and-forget telemetry."""

    @abstractmethod
    def track(self, user_id: int | None, event_name: str, subject: Event) -> None:
        """Record that the user did something to an event."""
        ...


class LoggingAnalyticsGateway(AnalyticsGateway):
    """Writes one structured log record per tracked action."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def track(self, user_id: int | None, event_name: str, subject: Event) -> None:
        if not self.enabled:
            return
        logger.info(
            "%s",
            event_name,
            extra={
                "analytics_user_id": user_id,
                "analytics_event_id": str(subject.id),
                "analytics_event_slug": subject.slug,
            },
        )
