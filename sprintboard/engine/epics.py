"""Epic creation, edits and status changes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ..workflow.exceptions import OpenItemsError, ValidationError
from ..workflow.models import Epic, EpicStatus, WorkItem
from ..workflow.transitions import EPIC_CLOSING_STATUSES, validate_epic_transition
from .progress import open_child_ids

EPIC_COLORS = [
    "#486966", "#BD2A2E", "#3B3936", "#B2BEBF",
    "#889C9B", "#6A8EAE", "#D9A441", "#7D5BA6",
]

ICE_FIELDS = ("impact", "confidence", "ease")


def ice_score(impact: float, confidence: float, ease: float) -> float:
    """Mean of the three ICE components, rounded to two decimals."""
    return round((impact + confidence + ease) / 3, 2)


def _check_ice(values: dict) -> None:
    for name in ICE_FIELDS:
        value = values[name]
        if not 1 <= value <= 10:
            raise ValidationError(name, f"must be between 1 and 10, got {value}")


def new_epic(
    epic_id: str,
    board_id: str,
    name: str = "",
    *,
    existing_count: int = 0,
    description: str = "",
    impact: int = 5,
    confidence: int = 5,
    ease: int = 5,
    now: datetime | None = None,
) -> Epic:
    _check_ice({"impact": impact, "confidence": confidence, "ease": ease})
    now = now or datetime.now()
    return Epic(
        id=epic_id,
        board_id=board_id,
        name=name.strip() or "Untitled Epic",
        color=EPIC_COLORS[existing_count % len(EPIC_COLORS)],
        description=description,
        impact=impact,
        confidence=confidence,
        ease=ease,
        ice_score=ice_score(impact, confidence, ease),
        created_at=now,
        updated_at=now,
    )


def save_epic(epic: Epic, now: datetime | None = None, **changes) -> Epic:
    """Apply editor changes and recompute the ICE score.

    Status is not editable here; use ``update_epic_status``.
    """
    if "status" in changes:
        raise ValidationError("status", "use update_epic_status to change epic status")
    merged = {name: changes.get(name, getattr(epic, name)) for name in ICE_FIELDS}
    _check_ice(merged)
    fields = {
        **changes,
        "ice_score": ice_score(**merged),
        "updated_at": now or datetime.now(),
    }
    return replace(epic, **fields)


def update_epic_status(
    epic: Epic,
    new_status: EpicStatus,
    work_items: list[WorkItem],
    now: datetime | None = None,
) -> Epic:
    """Move ``epic`` to ``new_status``.

    DONE and ARCHIVED need every child item to be DONE. ``archived_at`` and
    ``deleted_at`` are stamped on entry to those states.
    """
    if new_status is epic.status:
        return epic
    validate_epic_transition(epic.id, epic.status, new_status)

    if new_status in EPIC_CLOSING_STATUSES:
        open_ids = open_child_ids(epic.id, work_items)
        if open_ids:
            raise OpenItemsError(epic.id, epic.status, new_status, open_ids)

    now = now or datetime.now()
    changes: dict = {"status": new_status, "updated_at": now}
    if new_status is EpicStatus.ARCHIVED:
        changes["archived_at"] = now
    if new_status is EpicStatus.DELETED:
        changes["deleted_at"] = now
    return replace(epic, **changes)
