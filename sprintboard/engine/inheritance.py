"""Sprint membership inheritance.

When the epic set of a sprint changes, open work items follow their epic in
or out of the sprint. ``sprint_binding`` separates items a person placed
(MANUAL) from items placed here on an epic's behalf (AUTO):

* Inclusion: items of an added epic join the sprint when they are open and
  either unassigned or AUTO-bound. They become AUTO.
* Exclusion: items of a removed epic leave the sprint when they are open,
  AUTO-bound and currently in this sprint. They stay AUTO.

Both rules read the same original snapshot and run as one pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from ..workflow.models import Sprint, SprintBinding, SprintDraft, WorkItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpicDiff:
    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.added or self.removed)


@dataclass
class MembershipResult:
    work_items: list[WorkItem]
    assigned_item_ids: list[str] = field(default_factory=list)
    released_item_ids: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.assigned_item_ids or self.released_item_ids)


def diff_epic_ids(new_epic_ids, original_epic_ids) -> EpicDiff:
    new = frozenset(new_epic_ids)
    original = frozenset(original_epic_ids)
    return EpicDiff(added=new - original, removed=original - new)


def _claims(item: WorkItem, diff: EpicDiff) -> bool:
    return (
        item.epic_id in diff.added
        and (item.sprint_id is None or item.sprint_binding is SprintBinding.AUTO)
        and not item.is_done
    )


def _releases(item: WorkItem, diff: EpicDiff, sprint_id: str) -> bool:
    return (
        item.epic_id in diff.removed
        and item.sprint_id == sprint_id
        and item.sprint_binding is SprintBinding.AUTO
        and not item.is_done
    )


def apply_membership_policy(
    sprint: Sprint | SprintDraft,
    original: Sprint | None,
    work_items: list[WorkItem],
) -> MembershipResult:
    """Bind and release work items after ``sprint``'s epic set changed.

    ``original`` is None for a sprint being created. ``sprint.id`` must be
    the id the sprint will be saved under. Items without an epic, or whose
    epic is in both the old and the new set, are never touched.
    """
    if sprint.id is None:
        raise ValueError("Sprint id must be assigned before applying membership")

    diff = diff_epic_ids(sprint.epic_ids, original.epic_ids if original else ())
    if not diff:
        return MembershipResult(work_items=work_items)

    assigned: list[str] = []
    released: list[str] = []
    result = []
    for item in work_items:
        if item.epic_id is None:
            result.append(item)
        elif _claims(item, diff):
            result.append(replace(item, sprint_id=sprint.id, sprint_binding=SprintBinding.AUTO))
            assigned.append(item.id)
        elif _releases(item, diff, sprint.id):
            result.append(replace(item, sprint_id=None, sprint_binding=SprintBinding.AUTO))
            released.append(item.id)
        else:
            result.append(item)

    logger.debug(
        "Sprint %s membership: +%s epics, -%s epics, %d assigned, %d released",
        sprint.id, sorted(diff.added), sorted(diff.removed), len(assigned), len(released),
    )
    if not assigned and not released:
        return MembershipResult(work_items=work_items)
    return MembershipResult(
        work_items=result,
        assigned_item_ids=assigned,
        released_item_ids=released,
    )
