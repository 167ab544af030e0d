"""Epic progress derived from child work items."""

from __future__ import annotations

from ..workflow.models import EnrichedEpic, Epic, WorkItem


def compute_progress(epic: Epic, work_items: list[WorkItem]) -> EnrichedEpic:
    """Derive open/total counts, estimation totals and weighted percent done.

    Percent done is weighted by estimation points. When no child carries an
    estimate it falls back to the share of done items.
    """
    children = [item for item in work_items if item.epic_id == epic.id]
    total = len(children)
    if total == 0:
        return EnrichedEpic(epic=epic)

    done = [item for item in children if item.is_done]
    total_estimation = sum(item.estimation_points or 0 for item in children)
    done_estimation = sum(item.estimation_points or 0 for item in done)

    if total_estimation > 0:
        percent = done_estimation / total_estimation * 100
    else:
        percent = len(done) / total * 100

    return EnrichedEpic(
        epic=epic,
        open_items_count=total - len(done),
        total_items_count=total,
        total_estimation=total_estimation,
        done_estimation=done_estimation,
        percent_done_weighted=percent,
    )


def enrich_epics(epics: list[Epic], work_items: list[WorkItem]) -> list[EnrichedEpic]:
    return [compute_progress(epic, work_items) for epic in epics]


def open_child_ids(epic_id: str, work_items: list[WorkItem]) -> list[str]:
    return [
        item.id for item in work_items
        if item.epic_id == epic_id and not item.is_done
    ]
