"""Soft delete and restore for epics and sprints.

Deletion is a status change, never record removal. Effects on dependent
work items are applied in the same call, and every check runs before any
new collection is built.

Restoring an epic returns it to ACTIVE but does not re-attach the items that
were detached from it. Restoring a sprint returns it to PLANNED; the next
scheduler tick moves it on if its dates say so.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime

from ..workflow.exceptions import InvalidTransitionError, ValidationError
from ..workflow.models import Epic, EpicStatus, Sprint, SprintState, WorkItem
from .epics import update_epic_status

logger = logging.getLogger(__name__)

EPIC_ITEM_ACTIONS = frozenset({"detach"})
SPRINT_ITEM_ACTIONS = frozenset({"unassign", "move"})


@dataclass(frozen=True)
class UndoToken:
    """What a caller needs to offer an undo for a deletion."""

    kind: str
    entity_id: str
    deleted_at: datetime
    previous_status: str
    affected_item_ids: tuple[str, ...] = ()


@dataclass
class EpicDeletion:
    epics: list[Epic]
    work_items: list[WorkItem]
    undo: UndoToken


@dataclass
class SprintDeletion:
    sprints: list[Sprint]
    work_items: list[WorkItem]
    undo: UndoToken
    skipped_item_ids: list[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.skipped_item_ids)


def _find(collection, entity_id: str, label: str):
    for entity in collection:
        if entity.id == entity_id:
            return entity
    raise KeyError(f"{label} not found: {entity_id}")


def delete_epic(
    epic_id: str,
    epics: list[Epic],
    work_items: list[WorkItem],
    item_action: str = "detach",
    now: datetime | None = None,
) -> EpicDeletion:
    """Soft-delete an epic and detach its work items."""
    if item_action not in EPIC_ITEM_ACTIONS:
        raise ValidationError("item_action", f"unknown epic item action: {item_action}")
    epic = _find(epics, epic_id, "Epic")
    if epic.status is EpicStatus.DELETED:
        raise InvalidTransitionError(epic_id, epic.status, EpicStatus.DELETED)
    now = now or datetime.now()
    deleted = update_epic_status(epic, EpicStatus.DELETED, work_items, now=now)

    detached = []
    new_items = []
    for item in work_items:
        if item.epic_id == epic_id:
            new_items.append(replace(item, epic_id=None, epic_info=None))
            detached.append(item.id)
        else:
            new_items.append(item)

    logger.info(
        "epic.deleted epic_id=%s item_action=%s detached=%d",
        epic_id, item_action, len(detached),
    )
    return EpicDeletion(
        epics=[deleted if e.id == epic_id else e for e in epics],
        work_items=new_items if detached else work_items,
        undo=UndoToken(
            kind="epic",
            entity_id=epic_id,
            deleted_at=now,
            previous_status=epic.status.value,
            affected_item_ids=tuple(detached),
        ),
    )


def restore_epic(epic_id: str, epics: list[Epic], now: datetime | None = None) -> list[Epic]:
    """Bring a deleted epic back as ACTIVE, whatever it was before."""
    epic = _find(epics, epic_id, "Epic")
    if epic.status is not EpicStatus.DELETED:
        raise InvalidTransitionError(epic_id, epic.status, EpicStatus.ACTIVE)

    restored = replace(epic, status=EpicStatus.ACTIVE, updated_at=now or datetime.now())
    logger.info("epic.restored epic_id=%s", epic_id)
    return [restored if e.id == epic_id else e for e in epics]


def delete_sprint(
    sprint_id: str,
    sprints: list[Sprint],
    work_items: list[WorkItem],
    item_action: str = "unassign",
    target_sprint_id: str | None = None,
    now: datetime | None = None,
) -> SprintDeletion:
    """Soft-delete a sprint and unassign or move its work items.

    With ``move``, a target that is missing, deleted, or the sprint itself
    cannot take the items: they stay where they are and are reported in
    ``skipped_item_ids``. The sprint is deleted either way.
    """
    if item_action not in SPRINT_ITEM_ACTIONS:
        raise ValidationError("item_action", f"unknown sprint item action: {item_action}")
    sprint = _find(sprints, sprint_id, "Sprint")
    if sprint.state is SprintState.DELETED:
        raise InvalidTransitionError(sprint_id, sprint.state, SprintState.DELETED)

    target = None
    if item_action == "move":
        target = next(
            (
                s for s in sprints
                if s.id == target_sprint_id
                and s.id != sprint_id
                and s.state is not SprintState.DELETED
            ),
            None,
        )

    members = [item.id for item in work_items if item.sprint_id == sprint_id]
    skipped: list[str] = []
    if item_action == "unassign":
        new_items = [
            replace(item, sprint_id=None) if item.sprint_id == sprint_id else item
            for item in work_items
        ]
    elif target is not None:
        new_items = [
            replace(item, sprint_id=target.id) if item.sprint_id == sprint_id else item
            for item in work_items
        ]
    else:
        logger.warning(
            "Sprint %s move target %r unavailable; %d item(s) left in place",
            sprint_id, target_sprint_id, len(members),
        )
        new_items = work_items
        skipped = members

    now = now or datetime.now()
    deleted = replace(sprint, state=SprintState.DELETED, deleted_at=now)
    logger.info(
        "sprint.deleted sprint_id=%s item_action=%s target=%s",
        sprint_id, item_action, target_sprint_id,
    )
    return SprintDeletion(
        sprints=[deleted if s.id == sprint_id else s for s in sprints],
        work_items=new_items if members and not skipped else work_items,
        undo=UndoToken(
            kind="sprint",
            entity_id=sprint_id,
            deleted_at=now,
            previous_status=sprint.state.value,
            affected_item_ids=tuple(i for i in members if i not in skipped),
        ),
        skipped_item_ids=skipped,
    )


def restore_sprint(sprint_id: str, sprints: list[Sprint]) -> list[Sprint]:
    """Bring a deleted sprint back as PLANNED."""
    sprint = _find(sprints, sprint_id, "Sprint")
    if sprint.state is not SprintState.DELETED:
        raise InvalidTransitionError(sprint_id, sprint.state, SprintState.PLANNED)

    logger.info("sprint.restored sprint_id=%s", sprint_id)
    restored = replace(sprint, state=SprintState.PLANNED)
    return [restored if s.id == sprint_id else s for s in sprints]
