"""Change events emitted when a work item field changes.

Each change kind is its own small dataclass carrying only what it needs;
``field`` and ``event_type`` are class-level tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Union

from ..workflow.models import Status, User, WorkItem


@dataclass(frozen=True)
class StatusChange:
    from_status: Status
    to_status: Status

    field: ClassVar[str] = "status"
    event_type: ClassVar[str] = "item.status_changed"

    def summary(self) -> str:
        return f"Status changed to {self.to_status.value}"


@dataclass(frozen=True)
class AssigneeChange:
    from_name: str | None
    to_name: str | None

    field: ClassVar[str] = "assignee"
    event_type: ClassVar[str] = "item.assignee_changed"

    def summary(self) -> str:
        return f"Assigned to {self.to_name or 'nobody'}"


@dataclass(frozen=True)
class DueDateChange:
    from_date: datetime | None
    to_date: datetime | None

    field: ClassVar[str] = "dueDate"
    event_type: ClassVar[str] = "item.due_changed"

    def summary(self) -> str:
        if self.to_date is None:
            return "Due date removed"
        return f"Due date changed to {self.to_date.date().isoformat()}"


@dataclass(frozen=True)
class CommentAdded:
    text: str

    field: ClassVar[str] = "comment"
    event_type: ClassVar[str] = "item.comment_added"

    def summary(self) -> str:
        return "New comment"


@dataclass(frozen=True)
class ChecklistChange:
    from_progress: str
    to_progress: str

    field: ClassVar[str] = "checklist"
    event_type: ClassVar[str] = "item.field_updated"

    def summary(self) -> str:
        return f"Checklist {self.to_progress}"


Change = Union[StatusChange, AssigneeChange, DueDateChange, CommentAdded, ChecklistChange]


@dataclass(frozen=True)
class ItemRef:
    id: str
    board_id: str
    title: str
    assignee_id: str
    created_by: str


@dataclass(frozen=True)
class ItemUpdateEvent:
    item: ItemRef
    change: Change
    at: datetime
    watchers: tuple[str, ...] = ()
    actor: User | None = None

    @property
    def type(self) -> str:
        return self.change.event_type

    @property
    def field(self) -> str:
        return self.change.field


def make_event(
    item: WorkItem,
    change: Change,
    at: datetime | None = None,
    actor: User | None = None,
) -> ItemUpdateEvent:
    ref = ItemRef(
        id=item.id,
        board_id=item.board_id,
        title=item.title,
        assignee_id=item.assignee.id if item.assignee else "",
        created_by=item.reporter.id,
    )
    return ItemUpdateEvent(
        item=ref,
        change=change,
        at=at or datetime.now(),
        watchers=tuple(item.watchers),
        actor=actor,
    )
