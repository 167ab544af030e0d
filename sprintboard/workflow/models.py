"""Domain models for the board: work items, epics and sprints.

Entities reference each other by id only. Nothing here has behaviour
beyond small derived properties; state changes live in ``sprintboard.engine``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Status(Enum):
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"


class WorkItemType(Enum):
    STORY = "story"
    TASK = "task"
    BUG_URGENT = "bug_urgent"
    BUG_MINOR = "bug_minor"
    TICKET = "ticket"
    EPIC = "epic"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class SprintBinding(Enum):
    MANUAL = "manual"
    AUTO = "auto"


class EpicStatus(Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    DONE = "done"
    ARCHIVED = "archived"
    DELETED = "deleted"


class SprintState(Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    CLOSED = "closed"
    DELETED = "deleted"


@dataclass
class User:
    id: str
    name: str


@dataclass
class EpicInfo:
    """Denormalized epic snapshot carried on a work item for display."""

    id: str
    name: str
    color: str


@dataclass
class ChecklistItem:
    id: str
    text: str
    is_completed: bool = False


@dataclass
class WorkItem:
    id: str
    title: str
    board_id: str
    reporter: User
    type: WorkItemType = WorkItemType.TASK
    status: Status = Status.TODO
    priority: Priority = Priority.MEDIUM
    description: str = ""
    sprint_id: str | None = None
    sprint_binding: SprintBinding = SprintBinding.MANUAL
    epic_id: str | None = None
    epic_info: EpicInfo | None = None
    done_in_sprint_id: str | None = None
    estimation_points: float = 0
    assignee: User | None = None
    assignees: list[User] = field(default_factory=list)
    watchers: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    checklist: list[ChecklistItem] = field(default_factory=list)
    due_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE


@dataclass
class Epic:
    id: str
    board_id: str
    name: str
    color: str
    status: EpicStatus = EpicStatus.ACTIVE
    description: str = ""
    impact: int = 5
    confidence: int = 5
    ease: int = 5
    ice_score: float = 5.0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    archived_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def info(self) -> EpicInfo:
        return EpicInfo(id=self.id, name=self.name, color=self.color)


@dataclass
class EnrichedEpic:
    """An epic together with progress metrics derived from its child items."""

    epic: Epic
    open_items_count: int = 0
    total_items_count: int = 0
    total_estimation: float = 0
    done_estimation: float = 0
    percent_done_weighted: float = 0

    @property
    def id(self) -> str:
        return self.epic.id

    @property
    def ice_score(self) -> float:
        return self.epic.ice_score


@dataclass
class Sprint:
    id: str
    board_id: str
    number: int
    name: str
    start_at: datetime
    end_at: datetime
    state: SprintState = SprintState.PLANNED
    goal: str = ""
    epic_ids: list[str] = field(default_factory=list)
    deleted_at: datetime | None = None


@dataclass
class SprintDraft:
    """Editor-side sprint values before they are validated and saved.

    ``id`` is None for a sprint that has not been created yet.
    """

    name: str
    start_at: datetime
    end_at: datetime
    id: str | None = None
    goal: str = ""
    state: SprintState = SprintState.PLANNED
    epic_ids: list[str] = field(default_factory=list)

