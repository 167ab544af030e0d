"""Abstract board backend protocol."""

from datetime import datetime
from typing import Protocol

from .models import EnrichedEpic, Epic, EpicStatus, Sprint, SprintDraft, Status, WorkItem


class BoardBackend(Protocol):
    """Interface that any board backend must implement.

    Covers reads, epic/sprint/item saves, soft delete and restore, and the
    scheduler tick. Every decision is made by ``sprintboard.engine``; a
    backend only owns the collections.
    """

    async def list_work_items(self, sprint_id: str | None = None) -> list[WorkItem]: ...

    async def list_epics(self) -> list[EnrichedEpic]: ...

    async def list_sprints(self) -> list[Sprint]: ...

    async def get_work_item(self, item_id: str) -> WorkItem: ...

    async def get_epic(self, epic_id: str) -> Epic: ...

    async def get_sprint(self, sprint_id: str) -> Sprint: ...

    async def create_work_item(self, title: str, **fields) -> WorkItem: ...

    async def save_work_item(self, item: WorkItem) -> WorkItem: ...

    async def change_status(
        self, item_id: str, new_status: Status, constrained: bool = True
    ) -> WorkItem: ...

    async def create_epic(self, name: str, **fields) -> Epic: ...

    async def save_epic(self, epic_id: str, **changes) -> Epic: ...

    async def update_epic_status(self, epic_id: str, new_status: EpicStatus) -> Epic: ...

    async def save_sprint(self, draft: SprintDraft) -> Sprint: ...

    async def delete_epic(self, epic_id: str, item_action: str = "detach"): ...

    async def restore_epic(self, epic_id: str) -> Epic: ...

    async def delete_sprint(
        self,
        sprint_id: str,
        item_action: str = "unassign",
        target_sprint_id: str | None = None,
    ): ...

    async def restore_sprint(self, sprint_id: str) -> Sprint: ...

    async def tick(self, now: datetime | None = None) -> list[Sprint]: ...

    async def get_status_summary(self) -> dict: ...
