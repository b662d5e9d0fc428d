"""Parameter bundles for the organiser reports generated in the background."""

from enum import Enum

from events.domain import EventId
from events.domain.errors import UnknownReportError


class ReportKind(Enum):
    CONNECTIONS = "connections"
    EVENT_CHAT = "event_chat"
    PARTICIPANTS = "participants"
    ATTENDEE_LIST = "attendee_list"
    MOVEMENTS = "movements"
    COUNTERS = "counters"
    POLLS = "polls"

    @classmethod
    def parse(cls, value: str) -> "ReportKind":
        try:
            return cls(value)
        except ValueError:
            raise UnknownReportError(value) from None


CHAT_SCOPES = ("roundtable_id", "backstage_id", "stage_id")


def _positive_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def build_report_params(
    kind: ReportKind,
    event_id: EventId,
    options: dict | None = None,
    with_extra_fields: bool = False,
) -> dict:
    """Return the job parameters for a report.

    Chat reports only keep the positive roundtable, backstage and stage ids.
    A participants report reads `area` as "<segment> [<resource id>]".
    """
    options = options or {}
    params = {"event_id": str(event_id)}

    match kind:
        case ReportKind.EVENT_CHAT:
            for key in CHAT_SCOPES:
                value = _positive_int(options.get(key))
                if value > 0:
                    params[key] = value
        case ReportKind.PARTICIPANTS:
            area = str(options.get("area") or "").split()
            params.update(
                with_extra_fields=with_extra_fields,
                segment=area[0].strip() if area else None,
                resource_id=_positive_int(area[1]) if len(area) == 2 else None,
                with_minutes=True,
            )
        case ReportKind.ATTENDEE_LIST:
            params.update(
                with_extra_fields=False,
                segment="All",
                resource_id=None,
                with_minutes=False,
            )
        case ReportKind.CONNECTIONS | ReportKind.MOVEMENTS | ReportKind.COUNTERS | ReportKind.POLLS:
            pass
    return params
