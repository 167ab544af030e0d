from .dispatcher import (
    CoalescingDispatcher,
    NotificationDispatcher,
    RecordingDispatcher,
    Toast,
    notify,
)
from .events import (
    AssigneeChange,
    ChecklistChange,
    CommentAdded,
    DueDateChange,
    ItemUpdateEvent,
    StatusChange,
    make_event,
)

__all__ = [
    "AssigneeChange",
    "ChecklistChange",
    "CoalescingDispatcher",
    "CommentAdded",
    "DueDateChange",
    "ItemUpdateEvent",
    "NotificationDispatcher",
    "RecordingDispatcher",
    "StatusChange",
    "Toast",
    "make_event",
    "notify",
]
