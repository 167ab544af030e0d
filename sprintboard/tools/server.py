"""MCP server factory binding board handlers to a backend."""

from typing import Any, Callable

from claude_agent_sdk import create_sdk_mcp_server, tool

from ..workflow.interface import BoardBackend
from . import handlers


def create_board_server(backend: BoardBackend, can: Callable[[str], bool] | None = None):
    """Create an MCP server with board tools.

    Each handler is bound to its dependencies via closure so the @tool
    wrappers are clean single-argument async functions as the SDK expects.
    """

    @tool(
        "get_board_status",
        "Get board summary: work items by status, sprints by state, overall progress",
        {},
    )
    async def get_board_status(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_board_status_handler(args, backend)

    @tool(
        "list_epics",
        "List epics with ICE score and progress. Pass include_deleted='true' to show deleted epics.",
        {"include_deleted": str},
    )
    async def list_epics(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_epics_handler(args, backend)

    @tool(
        "list_sprints",
        "List sprints ordered by number. Filter by state (planned, active, closed, deleted).",
        {"state": str},
    )
    async def list_sprints(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_sprints_handler(args, backend)

    @tool(
        "get_sprint",
        "Get a sprint and the ids of the work items assigned to it",
        {"sprint_id": str},
    )
    async def get_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_sprint_handler(args, backend)

    @tool(
        "tick",
        "Advance sprint lifecycle states (planned/active/closed) to match the clock. Optional ISO 'now'.",
        {"now": str},
    )
    async def tick(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.tick_handler(args, backend)

    @tool(
        "move_item",
        "Move a work item to a board column. Only transitions allowed by the workflow rules succeed.",
        {"item_id": str, "status": str},
    )
    async def move_item(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.move_item_handler(args, backend)

    @tool(
        "get_velocity",
        "Estimation points completed per sprint and the average",
        {},
    )
    async def get_velocity(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.velocity_handler(args, backend)

    @tool(
        "delete_sprint",
        "Soft-delete a sprint. item_action is 'unassign' or 'move' (with target_sprint_id).",
        {"sprint_id": str, "item_action": str, "target_sprint_id": str},
    )
    async def delete_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.delete_sprint_handler(args, backend, can)

    @tool(
        "restore_sprint",
        "Restore a deleted sprint to planned",
        {"sprint_id": str},
    )
    async def restore_sprint(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.restore_sprint_handler(args, backend, can)

    return create_sdk_mcp_server(
        name="board",
        version="1.0.0",
        tools=[
            get_board_status,
            list_epics,
            list_sprints,
            get_sprint,
            tick,
            move_item,
            get_velocity,
            delete_sprint,
            restore_sprint,
        ],
    )
