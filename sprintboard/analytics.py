"""Board reports: velocity, burndown, epic progress, assignee workload."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .workflow.models import EnrichedEpic, Sprint, Status, User, WorkItem

SECONDS_PER_DAY = 24 * 3600


@dataclass
class VelocityReport:
    labels: list[str] = field(default_factory=list)
    data: list[float] = field(default_factory=list)
    average: float = 0.0


@dataclass
class BurndownReport:
    labels: list[str] = field(default_factory=list)
    ideal: list[float] = field(default_factory=list)
    actual: list[float] = field(default_factory=list)
    total_points: float = 0


@dataclass
class EpicProgressRow:
    epic: EnrichedEpic
    total_items: int
    done_items: int
    total_estimation: float
    done_estimation: float
    progress: float


@dataclass
class WorkloadRow:
    assignee: User
    open: int = 0
    in_progress: int = 0
    in_review: int = 0
    total_load: int = 0
    wip_breached: bool = False


def velocity(work_items: list[WorkItem], sprints: list[Sprint]) -> VelocityReport:
    """Points completed per sprint, attributed through ``done_in_sprint_id``."""
    points = {s.id: 0.0 for s in sprints}
    for item in work_items:
        if item.is_done and item.done_in_sprint_id in points:
            points[item.done_in_sprint_id] += item.estimation_points or 0

    data = [points[s.id] for s in sprints]
    return VelocityReport(
        labels=[s.name for s in sprints],
        data=data,
        average=sum(data) / len(data) if data else 0.0,
    )


def burndown(sprint: Sprint, work_items: list[WorkItem]) -> BurndownReport:
    """Ideal and actual remaining points for each day of ``sprint``.

    An item counts as burned on the day its last update falls on. There is
    no transition log, so a later edit to a done item moves its day.
    """
    items = [item for item in work_items if item.sprint_id == sprint.id]
    if not items:
        return BurndownReport()

    duration = max(1, (sprint.end_at.date() - sprint.start_at.date()).days)
    labels = [f"Day {i}" for i in range(duration + 1)]
    total = sum(item.estimation_points or 0 for item in items)
    ideal = [total - total / duration * i for i in range(duration + 1)]

    burned = [0.0] * (duration + 1)
    for item in items:
        if item.status is not Status.DONE or item.updated_at is None:
            continue
        elapsed = (item.updated_at - sprint.start_at).total_seconds() / SECONDS_PER_DAY
        day = max(1, math.ceil(elapsed))
        if day <= duration:
            burned[day] += item.estimation_points or 0

    actual = [total]
    for day in range(1, duration + 1):
        actual.append(actual[-1] - burned[day])
    return BurndownReport(labels=labels, ideal=ideal, actual=actual, total_points=total)


def epic_progress_report(epics: list[EnrichedEpic]) -> list[EpicProgressRow]:
    rows = [
        EpicProgressRow(
            epic=e,
            total_items=e.total_items_count,
            done_items=e.total_items_count - e.open_items_count,
            total_estimation=e.total_estimation,
            done_estimation=e.done_estimation,
            progress=e.percent_done_weighted,
        )
        for e in epics
    ]
    rows.sort(key=lambda row: row.epic.ice_score, reverse=True)
    return rows


def assignee_workload(
    work_items: list[WorkItem], users: list[User], wip_limit: int = 3
) -> list[WorkloadRow]:
    rows = {user.id: WorkloadRow(assignee=user) for user in users}
    for item in work_items:
        for assignee in item.assignees:
            row = rows.get(assignee.id)
            if row is None:
                continue
            if item.status in (Status.TODO, Status.BACKLOG):
                row.open += 1
            elif item.status is Status.IN_PROGRESS:
                row.in_progress += 1
            elif item.status is Status.IN_REVIEW:
                row.in_review += 1

    for row in rows.values():
        row.total_load = row.open + row.in_progress + row.in_review
        row.wip_breached = row.in_progress > wip_limit
    return sorted(rows.values(), key=lambda row: row.total_load, reverse=True)
