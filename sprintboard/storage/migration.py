"""One-time fixes applied to work items as they are loaded.

* A legacy ``sprint`` (sprint name) field becomes ``sprint_id`` when a loaded
  sprint has that name, and the legacy field is dropped either way.
* A missing ``sprint_binding`` defaults to ``manual``.

Running it on already-migrated data changes nothing.
"""

from __future__ import annotations

from ..workflow.models import Sprint, SprintBinding


def migrate_work_items(raw_items: list[dict], sprints: list[Sprint]) -> tuple[list[dict], bool]:
    """Return migrated copies of ``raw_items`` and whether anything changed."""
    by_name = {}
    for sprint in sprints:
        by_name.setdefault(sprint.name, sprint.id)

    changed = False
    migrated = []
    for raw in raw_items:
        item = dict(raw)

        if "sprint" in item:
            legacy_name = item.pop("sprint")
            if legacy_name and not item.get("sprint_id") and legacy_name in by_name:
                item["sprint_id"] = by_name[legacy_name]
            changed = True

        if not item.get("sprint_binding"):
            item["sprint_binding"] = SprintBinding.MANUAL.value
            changed = True

        migrated.append(item)
    return migrated, changed
