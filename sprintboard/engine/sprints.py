"""Sprint drafts: validation and save."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..workflow.exceptions import MissingActorError, ValidationError
from ..workflow.models import Sprint, SprintDraft, SprintState, WorkItem
from .inheritance import apply_membership_policy


@dataclass
class SprintSave:
    sprint: Sprint
    sprints: list[Sprint]
    work_items: list[WorkItem]
    assigned_item_ids: list[str] = field(default_factory=list)
    released_item_ids: list[str] = field(default_factory=list)


def new_sprint_draft(now: datetime | None = None, days: int = 14) -> SprintDraft:
    start = now or datetime.now()
    return SprintDraft(name="", start_at=start, end_at=start + timedelta(days=days))


def validate_draft(draft: SprintDraft) -> None:
    if not draft.name or not draft.name.strip():
        raise ValidationError("name", "Sprint name cannot be empty.")
    if draft.end_at <= draft.start_at:
        raise ValidationError("end_at", "End date must be after start date.")


def _new_sprint_id() -> str:
    return f"sprint-{uuid.uuid4().hex[:12]}"


def save_sprint(
    draft: SprintDraft,
    sprints: list[Sprint],
    work_items: list[WorkItem],
    board_id: str | None,
) -> SprintSave:
    """Validate ``draft``, apply membership inheritance and store the sprint.

    A new sprint gets ``number = len(sprints) + 1``; an existing one keeps its
    number and board. New sprints always start PLANNED and existing ones keep
    their state; ``draft.state`` is never applied here. Raises before
    producing anything if the draft is invalid, the board is missing, or the
    sprint id is unknown.
    """
    if not board_id:
        raise MissingActorError("an active board")
    validate_draft(draft)

    original = None
    if draft.id is not None:
        original = next((s for s in sprints if s.id == draft.id), None)
        if original is None:
            raise KeyError(f"Sprint not found: {draft.id}")

    sprint = Sprint(
        id=draft.id or _new_sprint_id(),
        board_id=original.board_id if original else board_id,
        number=original.number if original else len(sprints) + 1,
        name=draft.name.strip(),
        goal=draft.goal or "",
        start_at=draft.start_at,
        end_at=draft.end_at,
        state=original.state if original else SprintState.PLANNED,
        epic_ids=list(draft.epic_ids),
        deleted_at=original.deleted_at if original else None,
    )

    membership = apply_membership_policy(sprint, original, work_items)

    if original is None:
        new_sprints = [*sprints, sprint]
    else:
        new_sprints = [sprint if s.id == sprint.id else s for s in sprints]

    return SprintSave(
        sprint=sprint,
        sprints=new_sprints,
        work_items=membership.work_items,
        assigned_item_ids=membership.assigned_item_ids,
        released_item_ids=membership.released_item_ids,
    )
