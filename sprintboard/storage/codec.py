"""Plain-data encoding for board entities.

Enums are stored by value and datetimes as ISO strings, so a snapshot is
ordinary JSON. Decoding rehydrates both.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from enum import Enum
from typing import Any

from ..workflow.models import (
    ChecklistItem,
    Epic,
    EpicInfo,
    EpicStatus,
    Priority,
    Sprint,
    SprintBinding,
    SprintState,
    Status,
    User,
    WorkItem,
    WorkItemType,
)


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def to_dict(entity) -> dict:
    """Encode a WorkItem, Epic or Sprint."""
    return _encode(asdict(entity))


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _user(data: dict | None) -> User | None:
    return User(id=data["id"], name=data.get("name", "")) if data else None


def work_item_from_dict(data: dict) -> WorkItem:
    epic_info = data.get("epic_info")
    return WorkItem(
        id=data["id"],
        title=data.get("title", ""),
        board_id=data["board_id"],
        reporter=_user(data["reporter"]),
        type=WorkItemType(data.get("type", WorkItemType.TASK.value)),
        status=Status(data.get("status", Status.TODO.value)),
        priority=Priority(data.get("priority", Priority.MEDIUM.value)),
        description=data.get("description", ""),
        sprint_id=data.get("sprint_id"),
        sprint_binding=SprintBinding(data.get("sprint_binding", SprintBinding.MANUAL.value)),
        epic_id=data.get("epic_id"),
        epic_info=EpicInfo(**epic_info) if epic_info else None,
        done_in_sprint_id=data.get("done_in_sprint_id"),
        estimation_points=data.get("estimation_points") or 0,
        assignee=_user(data.get("assignee")),
        assignees=[_user(u) for u in data.get("assignees", [])],
        watchers=list(data.get("watchers", [])),
        labels=list(data.get("labels", [])),
        checklist=[ChecklistItem(**c) for c in data.get("checklist", [])],
        due_date=_dt(data.get("due_date")),
        created_at=_dt(data.get("created_at")),
        updated_at=_dt(data.get("updated_at")),
    )


def epic_from_dict(data: dict) -> Epic:
    return Epic(
        id=data["id"],
        board_id=data["board_id"],
        name=data.get("name", ""),
        color=data.get("color", ""),
        status=EpicStatus(data.get("status", EpicStatus.ACTIVE.value)),
        description=data.get("description", ""),
        impact=data.get("impact", 5),
        confidence=data.get("confidence", 5),
        ease=data.get("ease", 5),
        ice_score=data.get("ice_score", 5.0),
        created_at=_dt(data.get("created_at")),
        updated_at=_dt(data.get("updated_at")),
        archived_at=_dt(data.get("archived_at")),
        deleted_at=_dt(data.get("deleted_at")),
    )


def sprint_from_dict(data: dict) -> Sprint:
    return Sprint(
        id=data["id"],
        board_id=data["board_id"],
        number=data["number"],
        name=data.get("name", ""),
        start_at=_dt(data["start_at"]),
        end_at=_dt(data["end_at"]),
        state=SprintState(data.get("state", SprintState.PLANNED.value)),
        goal=data.get("goal", ""),
        epic_ids=list(data.get("epic_ids", [])),
        deleted_at=_dt(data.get("deleted_at")),
    )
