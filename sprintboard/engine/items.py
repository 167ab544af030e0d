"""Work item creation and editor saves."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ..notifications.dispatcher import NotificationDispatcher, notify
from ..notifications.events import (
    AssigneeChange,
    ChecklistChange,
    CommentAdded,
    DueDateChange,
    make_event,
)
from ..workflow.exceptions import MissingActorError, ValidationError
from ..workflow.models import (
    ChecklistItem,
    Epic,
    Priority,
    Status,
    SprintBinding,
    User,
    WorkItem,
    WorkItemType,
)
from .status import ChangeOrigin, Spotlight, apply_status_change


def _check_estimation(points: float) -> None:
    if points is not None and points < 0:
        raise ValidationError("estimation_points", f"must not be negative, got {points}")


def new_work_item(
    item_id: str,
    title: str,
    reporter: User | None,
    board_id: str | None,
    *,
    epic: Epic | None = None,
    sprint_id: str | None = None,
    type: WorkItemType = WorkItemType.TASK,
    priority: Priority = Priority.MEDIUM,
    status: Status = Status.TODO,
    estimation_points: float = 0,
    description: str = "",
    now: datetime | None = None,
) -> WorkItem:
    """Create an item the way a user does: MANUAL binding, reporter watching.

    Refuses to build an item without a reporter or a board.
    """
    if reporter is None:
        raise MissingActorError("an authenticated user")
    if not board_id:
        raise MissingActorError("an active board")
    _check_estimation(estimation_points)

    now = now or datetime.now()
    return WorkItem(
        id=item_id,
        title=title,
        board_id=board_id,
        reporter=reporter,
        type=type,
        status=status,
        priority=priority,
        description=description,
        sprint_id=sprint_id,
        sprint_binding=SprintBinding.MANUAL,
        epic_id=epic.id if epic else None,
        epic_info=epic.info if epic else None,
        estimation_points=estimation_points,
        assignee=reporter,
        assignees=[reporter],
        watchers=[reporter.id],
        created_at=now,
        updated_at=now,
    )


def checklist_progress(checklist: list[ChecklistItem]) -> str:
    done = sum(1 for entry in checklist if entry.is_completed)
    return f"{done}/{len(checklist)}"


def save_work_item(
    original: WorkItem,
    updated: WorkItem,
    *,
    now: datetime | None = None,
    dispatcher: NotificationDispatcher | None = None,
    spotlight: Spotlight | None = None,
    actor: User | None = None,
) -> WorkItem:
    """Editor save. Any status may be set; one event per changed field.

    Status goes through the unconstrained validator path so the DONE capture
    still applies.
    """
    if original.id != updated.id:
        raise ValueError(f"Cannot save {updated.id} over {original.id}")
    _check_estimation(updated.estimation_points)
    now = now or datetime.now()

    result = replace(updated, status=original.status, done_in_sprint_id=original.done_in_sprint_id)
    result = apply_status_change(
        result,
        updated.status,
        origin=ChangeOrigin.EDITOR,
        now=now,
        dispatcher=dispatcher,
        spotlight=spotlight,
        actor=actor,
    )

    if updated.assignee is not None and (
        original.assignee is None or updated.assignee.id != original.assignee.id
    ):
        change = AssigneeChange(
            original.assignee.name if original.assignee else None,
            updated.assignee.name,
        )
        notify(dispatcher, make_event(result, change, at=now, actor=actor))

    if updated.due_date != original.due_date:
        change = DueDateChange(original.due_date, updated.due_date)
        notify(dispatcher, make_event(result, change, at=now, actor=actor))

    before = checklist_progress(original.checklist)
    after = checklist_progress(updated.checklist)
    done_before = sum(1 for entry in original.checklist if entry.is_completed)
    done_after = sum(1 for entry in updated.checklist if entry.is_completed)
    if done_before != done_after:
        notify(dispatcher, make_event(result, ChecklistChange(before, after), at=now, actor=actor))

    return replace(result, updated_at=now)


def add_comment(
    item: WorkItem,
    text: str,
    *,
    dispatcher: NotificationDispatcher | None = None,
    now: datetime | None = None,
    actor: User | None = None,
) -> None:
    notify(dispatcher, make_event(item, CommentAdded(text), at=now, actor=actor))
