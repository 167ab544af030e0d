"""Time-driven sprint lifecycle: PLANNED → ACTIVE → CLOSED.

A PLANNED sprint whose end date has already passed (typically one just
restored from deletion) goes straight to CLOSED.

``tick`` is a pure function of the sprint collection and ``now``. Callers
decide the cadence (the CLI watch mode defaults to once a minute), but the
result never depends on it: a sprint that ended days ago closes on the next
call no matter how long the gap was.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from ..workflow.models import Sprint, SprintState

logger = logging.getLogger(__name__)

TERMINAL_STATES = frozenset({SprintState.CLOSED, SprintState.DELETED})


def _local(value: datetime) -> datetime:
    """Return ``value`` as a naive local-time datetime."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def end_of_day(value: datetime) -> datetime:
    """Last representable millisecond of ``value``'s local calendar day."""
    return _local(value).replace(hour=23, minute=59, second=59, microsecond=999000)


def next_state(sprint: Sprint, now: datetime) -> SprintState:
    """State ``sprint`` should be in at ``now``."""
    if sprint.state in TERMINAL_STATES:
        return sprint.state

    now = _local(now)
    start = _local(sprint.start_at)
    end = end_of_day(sprint.end_at)

    # PLANNED sprints past their end close directly; they never linger as PLANNED.
    if end < now:
        return SprintState.CLOSED
    if sprint.state is SprintState.PLANNED and start <= now:
        return SprintState.ACTIVE
    return sprint.state


def tick(sprints: list[Sprint], now: datetime) -> list[Sprint]:
    """Advance every sprint to the state its dates call for.

    Returns ``sprints`` itself when nothing changed, otherwise a new list in
    which only the changed sprints are new objects.
    """
    changed = False
    result = []
    for sprint in sprints:
        state = next_state(sprint, now)
        if state is sprint.state:
            result.append(sprint)
            continue
        logger.debug("Sprint %s: %s -> %s", sprint.id, sprint.state.value, state.value)
        result.append(replace(sprint, state=state))
        changed = True
    return result if changed else sprints
