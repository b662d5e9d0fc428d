"""Background job dispatch.

Jobs are fire-and-forget: enqueueing returns as soon as the queue accepted the
job and nothing tracks its completion.
"""

import logging
from abc import ABC, abstractmethod

from events import tasks
from events.services.reports import ReportKind

logger = logging.getLogger(__name__)

TIME_START_CHANGED = "time_start_changed"
RESCHEDULE_EVENT_EMAILS = "reschedule_event_emails"


class JobQueue(ABC):
    """Interface for handing work to background workers."""

    @abstractmethod
    def enqueue(self, job_type: str, actor: int | None, params: dict) -> None:
        """Queue a job of the given type on behalf of the actor."""
        ...


class CeleryJobQueue(JobQueue):
    """Dispatches jobs as Celery tasks."""

    NOTIFICATION_TASKS = {
        TIME_START_CHANGED: tasks.notify_time_start_change,
        RESCHEDULE_EVENT_EMAILS: tasks.reschedule_event_emails,
    }
    REPORT_TYPES = frozenset(kind.value for kind in ReportKind)

    def enqueue(self, job_type: str, actor: int | None, params: dict) -> None:
        if job_type in self.REPORT_TYPES:
            tasks.generate_report.delay(job_type, actor, params)
        elif job_type in self.NOTIFICATION_TASKS:
            self.NOTIFICATION_TASKS[job_type].delay(**params)
        else:
            raise ValueError(f"Unknown job type: {job_type}")
        logger.info("Enqueued %s job for actor %s: %s", job_type, actor, params)
