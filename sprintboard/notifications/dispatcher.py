"""Notification dispatchers.

The engine emits exactly one event per logical change. Turning a burst of
events for the same item into a single toast is the dispatcher's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable

from .events import ItemUpdateEvent

logger = logging.getLogger(__name__)

_SECTIONS = {"status": "status", "assignee": "assignee", "dueDate": "dueDate"}


@runtime_checkable
class NotificationDispatcher(Protocol):
    def emit(self, event: ItemUpdateEvent) -> None: ...


def notify(dispatcher: NotificationDispatcher | None, event: ItemUpdateEvent) -> None:
    """Hand ``event`` to ``dispatcher``. Delivery failures are logged, not raised."""
    if dispatcher is None:
        return
    try:
        dispatcher.emit(event)
    except Exception:
        logger.exception("Failed to dispatch %s for item %s", event.type, event.item.id)


class RecordingDispatcher:
    """Keeps every emitted event. For tests and demos."""

    def __init__(self) -> None:
        self.events: list[ItemUpdateEvent] = []

    def emit(self, event: ItemUpdateEvent) -> None:
        self.events.append(event)

    def fields(self) -> list[str]:
        return [e.field for e in self.events]


@dataclass
class Toast:
    id: str
    item_id: str
    title: str
    changes: list[str] = field(default_factory=list)
    highlight_section: str = "title"


@dataclass
class _Pending:
    toast: Toast
    last_at: datetime


class CoalescingDispatcher:
    """Merges changes to the same item into one toast per quiet window.

    Each new event for an item restarts that item's window. ``flush`` returns
    the toasts whose window has elapsed, newest first.
    """

    def __init__(self, user_id: str, window_seconds: float = 3.0) -> None:
        self._user_id = user_id
        self._window = timedelta(seconds=window_seconds)
        self._pending: dict[str, _Pending] = {}

    def is_relevant(self, event: ItemUpdateEvent) -> bool:
        return (
            self._user_id == event.item.created_by
            or self._user_id == event.item.assignee_id
            or self._user_id in event.watchers
        )

    def emit(self, event: ItemUpdateEvent) -> None:
        if not self.is_relevant(event):
            return

        summary = event.change.summary()
        existing = self._pending.get(event.item.id)
        changes = list(existing.toast.changes) if existing else []
        if summary not in changes:
            changes.append(summary)

        toast = Toast(
            id=f"toast-{event.item.id}-{int(event.at.timestamp() * 1000)}",
            item_id=event.item.id,
            title=event.item.title,
            changes=changes,
            highlight_section=_SECTIONS.get(event.field, "title"),
        )
        self._pending[event.item.id] = _Pending(toast=toast, last_at=event.at)

    def pending_item_ids(self) -> list[str]:
        return list(self._pending)

    def flush(self, now: datetime) -> list[Toast]:
        ready = [
            (item_id, p) for item_id, p in self._pending.items()
            if now - p.last_at >= self._window
        ]
        for item_id, _ in ready:
            del self._pending[item_id]
        ready.sort(key=lambda pair: pair[1].last_at, reverse=True)
        return [p.toast for _, p in ready]
