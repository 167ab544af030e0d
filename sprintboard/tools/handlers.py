"""Pure handler functions for board MCP tools.

Each handler takes (args, backend) and returns MCP result format.
No SDK dependency, testable with InMemoryAdapter.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

from .. import analytics
from ..storage.codec import to_dict
from ..workflow.exceptions import InvalidTransitionError, ValidationError
from ..workflow.interface import BoardBackend
from ..workflow.models import Status

Can = Callable[[str], bool]


def _text_result(text: str) -> dict[str, Any]:
    """Build MCP tool result with a text content block."""
    return {"content": [{"type": "text", "text": text}]}


def _json_result(data: Any) -> dict[str, Any]:
    """Build MCP tool result with JSON-serialized content."""
    return _text_result(json.dumps(data, indent=2, default=str))


def _denied(permission: str) -> dict[str, Any]:
    return _text_result(f"Error: permission denied: {permission}")


async def get_board_status_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """Get board summary: item counts by status, sprint counts by state."""
    return _json_result(await backend.get_status_summary())


async def list_epics_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """List epics with derived progress, highest ICE score first."""
    enriched = await backend.list_epics()
    include_deleted = str(args.get("include_deleted", "")).lower() == "true"
    rows = [
        {
            **to_dict(e.epic),
            "open_items_count": e.open_items_count,
            "total_items_count": e.total_items_count,
            "total_estimation": e.total_estimation,
            "percent_done_weighted": round(e.percent_done_weighted, 2),
        }
        for e in sorted(enriched, key=lambda e: e.ice_score, reverse=True)
        if include_deleted or e.epic.status.value != "deleted"
    ]
    return _json_result(rows)


async def list_sprints_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """List sprints, optionally filtered by state."""
    sprints = await backend.list_sprints()
    state = args.get("state")
    if state:
        sprints = [s for s in sprints if s.state.value == state]
    sprints.sort(key=lambda s: s.number)
    return _json_result([to_dict(s) for s in sprints])


async def get_sprint_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """Get a sprint with the ids of its work items."""
    sprint_id = args["sprint_id"]
    try:
        sprint = await backend.get_sprint(sprint_id)
    except KeyError:
        return _text_result(f"Error: Sprint not found: {sprint_id}")
    items = await backend.list_work_items(sprint_id=sprint_id)
    return _json_result({
        "sprint": to_dict(sprint),
        "work_item_ids": [i.id for i in items],
    })


async def tick_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """Advance sprint states to match the clock (or the given ISO ``now``)."""
    now = args.get("now")
    try:
        when = datetime.fromisoformat(now) if now else None
    except ValueError:
        return _text_result(f"Error: invalid timestamp: {now}")
    changed = await backend.tick(when)
    return _json_result({"changed": [{"id": s.id, "state": s.state.value} for s in changed]})


async def move_item_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """Move a work item to another board column, enforcing workflow rules."""
    item_id = args["item_id"]
    try:
        new_status = Status(args["status"])
    except ValueError:
        return _text_result(f"Error: unknown status: {args['status']}")
    try:
        item = await backend.change_status(item_id, new_status, constrained=True)
    except KeyError:
        return _text_result(f"Error: Work item not found: {item_id}")
    except InvalidTransitionError as e:
        return _text_result(f"Error: {e}")
    return _json_result(to_dict(item))


async def velocity_handler(
    args: dict[str, Any], backend: BoardBackend
) -> dict[str, Any]:
    """Points completed per sprint."""
    sprints = [s for s in await backend.list_sprints() if s.state.value != "deleted"]
    report = analytics.velocity(await backend.list_work_items(), sprints)
    return _json_result({
        "labels": report.labels,
        "data": report.data,
        "average": report.average,
    })


async def delete_sprint_handler(
    args: dict[str, Any], backend: BoardBackend, can: Can | None = None
) -> dict[str, Any]:
    """Soft-delete a sprint, unassigning or moving its items."""
    if can is not None and not can("sprint.manage"):
        return _denied("sprint.manage")
    sprint_id = args["sprint_id"]
    try:
        result = await backend.delete_sprint(
            sprint_id,
            item_action=args.get("item_action") or "unassign",
            target_sprint_id=args.get("target_sprint_id") or None,
        )
    except KeyError:
        return _text_result(f"Error: Sprint not found: {sprint_id}")
    except (InvalidTransitionError, ValidationError) as e:
        return _text_result(f"Error: {e}")
    return _json_result({
        "deleted": sprint_id,
        "affected_item_ids": list(result.undo.affected_item_ids),
        "skipped_item_ids": result.skipped_item_ids,
    })


async def restore_sprint_handler(
    args: dict[str, Any], backend: BoardBackend, can: Can | None = None
) -> dict[str, Any]:
    """Restore a deleted sprint to PLANNED."""
    if can is not None and not can("sprint.manage"):
        return _denied("sprint.manage")
    sprint_id = args["sprint_id"]
    try:
        sprint = await backend.restore_sprint(sprint_id)
    except KeyError:
        return _text_result(f"Error: Sprint not found: {sprint_id}")
    except InvalidTransitionError as e:
        return _text_result(f"Error: {e}")
    return _json_result(to_dict(sprint))
