"""Board backend persisted through a SnapshotStore.

Loads the three collections on construction, running the one-time work item
migration, and writes them back after every mutation.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from ..notifications.dispatcher import NotificationDispatcher
from ..storage import codec
from ..storage.migration import migrate_work_items
from ..storage.snapshot import SnapshotStore
from ..workflow.models import User
from .memory import InMemoryAdapter

logger = logging.getLogger(__name__)

WORK_ITEMS_KEY = "workItems"
EPICS_KEY = "epics"
SPRINTS_KEY = "sprints"


def _next_number(ids: list[str], prefix: str) -> int:
    numbers = [
        int(m.group(1)) for m in (re.fullmatch(rf"{re.escape(prefix)}(\d+)", i) for i in ids) if m
    ]
    return max(numbers, default=0) + 1


class SnapshotAdapter(InMemoryAdapter):
    def __init__(
        self,
        store: SnapshotStore,
        board_id: str | None = "board-1",
        user: User | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock=datetime.now,
    ):
        super().__init__(board_id=board_id, user=user, dispatcher=dispatcher, clock=clock)
        self._store = store
        self.migrated = False
        self._load()

    def _load(self) -> None:
        self.sprints = [codec.sprint_from_dict(d) for d in self._store.load(SPRINTS_KEY, [])]
        self.epics = [codec.epic_from_dict(d) for d in self._store.load(EPICS_KEY, [])]

        raw_items = self._store.load(WORK_ITEMS_KEY, [])
        raw_items, self.migrated = migrate_work_items(raw_items, self.sprints)
        self.work_items = [codec.work_item_from_dict(d) for d in raw_items]
        if self.migrated:
            logger.info("Migrated %d work item(s) in %s", len(raw_items), self._store.directory)
            self._store.save(WORK_ITEMS_KEY, raw_items)

        self._next_item_id = _next_number([i.id for i in self.work_items], "PROJ-")
        self._next_epic_id = _next_number([e.id for e in self.epics], "epic-")

    async def _changed(self) -> None:
        self._store.save(WORK_ITEMS_KEY, [codec.to_dict(i) for i in self.work_items])
        self._store.save(EPICS_KEY, [codec.to_dict(e) for e in self.epics])
        self._store.save(SPRINTS_KEY, [codec.to_dict(s) for s in self.sprints])
