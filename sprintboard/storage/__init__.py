from .codec import epic_from_dict, sprint_from_dict, to_dict, work_item_from_dict
from .migration import migrate_work_items
from .snapshot import SnapshotStore

__all__ = [
    "SnapshotStore",
    "epic_from_dict",
    "migrate_work_items",
    "sprint_from_dict",
    "to_dict",
    "work_item_from_dict",
]
