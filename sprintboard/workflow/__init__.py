from .models import (
    EnrichedEpic,
    Epic,
    EpicStatus,
    Sprint,
    SprintBinding,
    SprintDraft,
    SprintState,
    Status,
    WorkItem,
    WorkItemType,
)
from .interface import BoardBackend

__all__ = [
    "WorkItem",
    "Epic",
    "EnrichedEpic",
    "Sprint",
    "SprintDraft",
    "Status",
    "WorkItemType",
    "SprintBinding",
    "EpicStatus",
    "SprintState",
    "BoardBackend",
]
