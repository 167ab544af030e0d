"""Board configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Callable

import yaml

from .access import ReauthGate
from .engine.sprints import new_sprint_draft
from .notifications.dispatcher import CoalescingDispatcher
from .workflow.models import SprintDraft


@dataclass
class BoardConfig:
    """Tunables for the collaborators around the engine."""

    tick_interval_seconds: int = 60
    reauth_window_hours: float = 12
    coalesce_window_seconds: float = 3.0
    wip_limit: int = 3
    default_sprint_days: int = 14
    storage_namespace: str = "so."
    storage_version: int = 1


def load_config(path: Path | None) -> BoardConfig:
    """Read a YAML config file. Missing or empty files give the defaults."""
    if path is None or not path.exists():
        return BoardConfig()

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {path}")

    known = {f.name for f in fields(BoardConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return BoardConfig(**data)


def make_reauth_gate(
    config: BoardConfig,
    last_auth_at: datetime | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ReauthGate:
    return ReauthGate(config.reauth_window_hours, last_auth_at, clock=clock)


def make_dispatcher(config: BoardConfig, user_id: str) -> CoalescingDispatcher:
    return CoalescingDispatcher(user_id, window_seconds=config.coalesce_window_seconds)


def make_sprint_draft(config: BoardConfig, now: datetime | None = None) -> SprintDraft:
    return new_sprint_draft(now, days=config.default_sprint_days)
