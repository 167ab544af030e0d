"""In-memory board backend for tests and demos."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ..engine import deletion, epics, inheritance, items, progress, scheduler, sprints, status
from ..engine.status import ChangeOrigin, Spotlight
from ..notifications.dispatcher import NotificationDispatcher
from ..workflow.exceptions import MissingActorError
from ..workflow.models import (
    EnrichedEpic,
    Epic,
    EpicStatus,
    Sprint,
    SprintBinding,
    SprintDraft,
    SprintState,
    Status,
    User,
    WorkItem,
)


class InMemoryAdapter:
    """BoardBackend backed by lists. Every rule lives in ``sprintboard.engine``.

    Collections are replaced wholesale after each operation, never edited in
    place, so a caller holding an earlier list keeps a consistent snapshot.
    """

    def __init__(
        self,
        board_id: str | None = "board-1",
        user: User | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock=datetime.now,
    ):
        self._board_id = board_id
        self._user = user
        self._dispatcher = dispatcher
        self._clock = clock
        self.work_items: list[WorkItem] = []
        self.epics: list[Epic] = []
        self.sprints: list[Sprint] = []
        self.spotlight = Spotlight()
        self._next_item_id = 1
        self._next_epic_id = 1

    # Reads

    async def list_work_items(self, sprint_id: str | None = None) -> list[WorkItem]:
        if sprint_id is None:
            return list(self.work_items)
        return [item for item in self.work_items if item.sprint_id == sprint_id]

    async def list_epics(self) -> list[EnrichedEpic]:
        return progress.enrich_epics(self.epics, self.work_items)

    async def list_sprints(self) -> list[Sprint]:
        return list(self.sprints)

    async def get_work_item(self, item_id: str) -> WorkItem:
        for item in self.work_items:
            if item.id == item_id:
                return item
        raise KeyError(f"Work item not found: {item_id}")

    async def get_epic(self, epic_id: str) -> Epic:
        for epic in self.epics:
            if epic.id == epic_id:
                return epic
        raise KeyError(f"Epic not found: {epic_id}")

    async def get_sprint(self, sprint_id: str) -> Sprint:
        for sprint in self.sprints:
            if sprint.id == sprint_id:
                return sprint
        raise KeyError(f"Sprint not found: {sprint_id}")

    # Work items

    async def create_work_item(self, title: str, **fields) -> WorkItem:
        epic_id = fields.pop("epic_id", None)
        epic = await self.get_epic(epic_id) if epic_id else None
        item = items.new_work_item(
            f"PROJ-{self._next_item_id}",
            title,
            self._user,
            self._board_id,
            epic=epic,
            now=self._clock(),
            **fields,
        )
        self._next_item_id += 1
        self.work_items = [item, *self.work_items]
        await self._changed()
        return item

    async def save_work_item(self, item: WorkItem) -> WorkItem:
        original = await self.get_work_item(item.id)
        saved = items.save_work_item(
            original,
            item,
            now=self._clock(),
            dispatcher=self._dispatcher,
            spotlight=self.spotlight,
            actor=self._user,
        )
        self.work_items = status.replace_item(self.work_items, saved)
        await self._changed()
        return saved

    async def change_status(
        self, item_id: str, new_status: Status, constrained: bool = True
    ) -> WorkItem:
        """Board moves are ``constrained``; editor changes are not."""
        original = await self.get_work_item(item_id)
        updated = status.apply_status_change(
            original,
            new_status,
            origin=ChangeOrigin.BOARD if constrained else ChangeOrigin.EDITOR,
            now=self._clock(),
            dispatcher=self._dispatcher,
            spotlight=self.spotlight,
            actor=self._user,
        )
        if updated is not original:
            self.work_items = status.replace_item(self.work_items, updated)
            await self._changed()
        return updated

    async def assign_to_sprint(self, item_id: str, sprint_id: str | None) -> WorkItem:
        """Direct user placement; always MANUAL."""
        if sprint_id is not None:
            await self.get_sprint(sprint_id)
        item = await self.get_work_item(item_id)
        updated = replace(
            item,
            sprint_id=sprint_id,
            sprint_binding=SprintBinding.MANUAL,
            updated_at=self._clock(),
        )
        self.work_items = status.replace_item(self.work_items, updated)
        await self._changed()
        return updated

    async def add_comment(self, item_id: str, text: str) -> None:
        item = await self.get_work_item(item_id)
        items.add_comment(
            item, text, dispatcher=self._dispatcher, now=self._clock(), actor=self._user
        )

    # Epics

    async def create_epic(self, name: str, **fields) -> Epic:
        if not self._board_id:
            raise MissingActorError("an active board")
        epic = epics.new_epic(
            f"epic-{self._next_epic_id}",
            self._board_id,
            name,
            existing_count=len(self.epics),
            now=self._clock(),
            **fields,
        )
        self._next_epic_id += 1
        self.epics = [epic, *self.epics]
        await self._changed()
        return epic

    async def save_epic(self, epic_id: str, **changes) -> Epic:
        epic = await self.get_epic(epic_id)
        saved = epics.save_epic(epic, now=self._clock(), **changes)
        self.epics = [saved if e.id == epic_id else e for e in self.epics]
        await self._changed()
        return saved

    async def update_epic_status(self, epic_id: str, new_status: EpicStatus) -> Epic:
        epic = await self.get_epic(epic_id)
        updated = epics.update_epic_status(epic, new_status, self.work_items, now=self._clock())
        self.epics = [updated if e.id == epic_id else e for e in self.epics]
        await self._changed()
        return updated

    async def delete_epic(self, epic_id: str, item_action: str = "detach") -> deletion.UndoToken:
        result = deletion.delete_epic(
            epic_id, self.epics, self.work_items, item_action, now=self._clock()
        )
        self.epics = result.epics
        self.work_items = result.work_items
        await self._changed()
        return result.undo

    async def restore_epic(self, epic_id: str) -> Epic:
        self.epics = deletion.restore_epic(epic_id, self.epics, now=self._clock())
        await self._changed()
        return await self.get_epic(epic_id)

    # Sprints

    async def save_sprint(self, draft: SprintDraft) -> Sprint:
        result = sprints.save_sprint(draft, self.sprints, self.work_items, self._board_id)
        self.sprints = result.sprints
        self.work_items = result.work_items
        await self._changed()
        return result.sprint

    async def preview_membership(self, draft: SprintDraft) -> inheritance.MembershipResult:
        """What saving ``draft`` would do to work items, without saving."""
        original = await self.get_sprint(draft.id) if draft.id else None
        if draft.id is None:
            draft = replace(draft, id="(new)")
        return inheritance.apply_membership_policy(draft, original, self.work_items)

    async def delete_sprint(
        self,
        sprint_id: str,
        item_action: str = "unassign",
        target_sprint_id: str | None = None,
    ) -> deletion.SprintDeletion:
        result = deletion.delete_sprint(
            sprint_id,
            self.sprints,
            self.work_items,
            item_action,
            target_sprint_id,
            now=self._clock(),
        )
        self.sprints = result.sprints
        self.work_items = result.work_items
        await self._changed()
        return result

    async def restore_sprint(self, sprint_id: str) -> Sprint:
        self.sprints = deletion.restore_sprint(sprint_id, self.sprints)
        await self._changed()
        return await self.get_sprint(sprint_id)

    async def undo(self, token: deletion.UndoToken):
        if token.kind == "epic":
            return await self.restore_epic(token.entity_id)
        if token.kind == "sprint":
            return await self.restore_sprint(token.entity_id)
        raise ValueError(f"Unknown undo kind: {token.kind}")

    async def tick(self, now: datetime | None = None) -> list[Sprint]:
        """Run the lifecycle scheduler. Returns the sprints whose state moved."""
        before = {s.id: s.state for s in self.sprints}
        updated = scheduler.tick(self.sprints, now or self._clock())
        if updated is self.sprints:
            return []
        self.sprints = updated
        await self._changed()
        return [s for s in updated if before.get(s.id) is not s.state]

    async def get_status_summary(self) -> dict:
        live = [s for s in self.sprints if s.state is not SprintState.DELETED]
        by_state: dict[str, int] = {}
        for s in self.sprints:
            by_state[s.state.value] = by_state.get(s.state.value, 0) + 1
        by_status: dict[str, int] = {}
        for item in self.work_items:
            by_status[item.status.value] = by_status.get(item.status.value, 0) + 1
        done = by_status.get(Status.DONE.value, 0)
        total = len(self.work_items)

        return {
            "board_id": self._board_id,
            "total_items": total,
            "items_by_status": by_status,
            "total_epics": sum(1 for e in self.epics if e.status is not EpicStatus.DELETED),
            "total_sprints": len(live),
            "sprints_by_state": by_state,
            "active_sprint_ids": [s.id for s in live if s.state is SprintState.ACTIVE],
            "progress_pct": round(done / total * 100, 1) if total > 0 else 0.0,
        }

    async def _changed(self) -> None:
        """Hook for persistent subclasses; called after every mutation."""
