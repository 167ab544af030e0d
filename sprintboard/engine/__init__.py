from .deletion import (
    EpicDeletion,
    SprintDeletion,
    UndoToken,
    delete_epic,
    delete_sprint,
    restore_epic,
    restore_sprint,
)
from .epics import ice_score, new_epic, save_epic, update_epic_status
from .inheritance import MembershipResult, apply_membership_policy, diff_epic_ids
from .items import add_comment, new_work_item, save_work_item
from .progress import compute_progress, enrich_epics
from .scheduler import end_of_day, tick
from .sprints import SprintSave, new_sprint_draft, save_sprint, validate_draft
from .status import ChangeOrigin, Spotlight, apply_status_change, replace_item

__all__ = [
    "ChangeOrigin",
    "EpicDeletion",
    "MembershipResult",
    "Spotlight",
    "SprintDeletion",
    "SprintSave",
    "UndoToken",
    "add_comment",
    "apply_membership_policy",
    "apply_status_change",
    "compute_progress",
    "delete_epic",
    "delete_sprint",
    "diff_epic_ids",
    "end_of_day",
    "enrich_epics",
    "ice_score",
    "new_epic",
    "new_sprint_draft",
    "new_work_item",
    "replace_item",
    "restore_epic",
    "restore_sprint",
    "save_epic",
    "save_sprint",
    "tick",
    "update_epic_status",
    "validate_draft",
]
