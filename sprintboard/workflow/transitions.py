"""Status transition tables defined as data."""

from .exceptions import InvalidTransitionError
from .models import EpicStatus, Status

# Board drag-and-drop path. DONE has no outgoing edge.
WORKFLOW_RULES: frozenset[tuple[Status, Status]] = frozenset(
    {
        (Status.BACKLOG, Status.TODO),               # schedule
        (Status.TODO, Status.BACKLOG),               # deschedule
        (Status.TODO, Status.IN_PROGRESS),           # start
        (Status.IN_PROGRESS, Status.TODO),           # stop
        (Status.IN_PROGRESS, Status.IN_REVIEW),      # submit for review
        (Status.IN_REVIEW, Status.IN_PROGRESS),      # reject from review
        (Status.IN_REVIEW, Status.DONE),             # approve
    }
)

EPIC_TRANSITIONS: frozenset[tuple[EpicStatus, EpicStatus]] = frozenset(
    {
        (EpicStatus.ACTIVE, EpicStatus.ON_HOLD),     # hold
        (EpicStatus.ON_HOLD, EpicStatus.ACTIVE),     # activate
        (EpicStatus.ACTIVE, EpicStatus.DONE),        # mark done
        (EpicStatus.ON_HOLD, EpicStatus.DONE),       # mark done
        (EpicStatus.DONE, EpicStatus.ACTIVE),        # reopen
        (EpicStatus.DONE, EpicStatus.ARCHIVED),      # archive
        (EpicStatus.ARCHIVED, EpicStatus.ACTIVE),    # reopen
    }
    | {(s, EpicStatus.DELETED) for s in EpicStatus if s is not EpicStatus.DELETED}
)

# Epic states that may only be entered with zero open child items.
EPIC_CLOSING_STATUSES = frozenset({EpicStatus.DONE, EpicStatus.ARCHIVED})


def allowed_targets(status: Status) -> frozenset[Status]:
    """Statuses directly reachable from ``status`` on the board."""
    return frozenset(to for frm, to in WORKFLOW_RULES if frm is status)


def validate_transition(item_id: str, from_status: Status, to_status: Status) -> None:
    """Raise InvalidTransitionError if the board does not allow the move."""
    if (from_status, to_status) not in WORKFLOW_RULES:
        raise InvalidTransitionError(item_id, from_status, to_status)


def validate_epic_transition(
    epic_id: str, from_status: EpicStatus, to_status: EpicStatus
) -> None:
    if (from_status, to_status) not in EPIC_TRANSITIONS:
        raise InvalidTransitionError(epic_id, from_status, to_status)
