"""Work item status changes.

Two entry points reach here. The board (drag-and-drop) path is checked
against the workflow rule table; the editor path is not. Both share the
DONE side effect and the change notification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from ..notifications.dispatcher import NotificationDispatcher, notify
from ..notifications.events import StatusChange, make_event
from ..workflow.exceptions import InvalidTransitionError
from ..workflow.models import Status, User, WorkItem
from ..workflow.transitions import validate_transition

logger = logging.getLogger(__name__)


class ChangeOrigin(Enum):
    BOARD = "board"
    EDITOR = "editor"


@dataclass
class Spotlight:
    """Single slot naming the most recently changed item, if any."""

    item_id: str | None = None

    def mark(self, item_id: str) -> None:
        self.item_id = item_id

    def clear(self) -> None:
        self.item_id = None

    def is_lit(self, item_id: str) -> bool:
        return self.item_id is not None and self.item_id == item_id


def apply_status_change(
    item: WorkItem,
    new_status: Status,
    *,
    origin: ChangeOrigin = ChangeOrigin.BOARD,
    now: datetime | None = None,
    dispatcher: NotificationDispatcher | None = None,
    spotlight: Spotlight | None = None,
    actor: User | None = None,
) -> WorkItem:
    """Return ``item`` moved to ``new_status``.

    Raises InvalidTransitionError on the board path when the rule table has
    no edge from the current status. Setting the same status is a no-op and
    returns ``item`` itself without an event.

    The first move into DONE records the current sprint in
    ``done_in_sprint_id``; later completions never overwrite it.
    """
    if new_status is item.status:
        return item

    if origin is ChangeOrigin.BOARD:
        try:
            validate_transition(item.id, item.status, new_status)
        except InvalidTransitionError:
            logger.warning(
                "Rejected board move of %s: %s -> %s",
                item.id, item.status.value, new_status.value,
            )
            raise

    now = now or datetime.now()
    changes: dict = {"status": new_status, "updated_at": now}
    if new_status is Status.DONE and item.done_in_sprint_id is None:
        changes["done_in_sprint_id"] = item.sprint_id
    updated = replace(item, **changes)

    if spotlight is not None:
        spotlight.mark(updated.id)

    notify(
        dispatcher,
        make_event(updated, StatusChange(item.status, new_status), at=now, actor=actor),
    )
    return updated


def replace_item(work_items: list[WorkItem], updated: WorkItem) -> list[WorkItem]:
    """New list with the item sharing ``updated.id`` swapped for ``updated``."""
    return [updated if item.id == updated.id else item for item in work_items]
