"""Board membership, permissions and the re-authentication gate.

The engine trusts its caller; these are the collaborators a caller consults
before invoking a sensitive operation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from .workflow.exceptions import MissingActorError
from .workflow.models import User


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    permissions: frozenset[str]


ROLES = [
    Role(
        "role-owner",
        "Owner",
        frozenset({
            "board.manage", "member.manage", "epic.manage", "sprint.manage",
            "item.create", "item.edit", "item.comment",
        }),
    ),
    Role(
        "role-admin",
        "Admin",
        frozenset({"epic.manage", "sprint.manage", "item.create", "item.edit", "item.comment"}),
    ),
    Role("role-member", "Member", frozenset({"item.create", "item.edit", "item.comment"})),
    Role("role-viewer", "Viewer", frozenset({"item.comment"})),
]


def role_by_name(name: str) -> Role:
    for role in ROLES:
        if role.name == name:
            return role
    raise KeyError(f"Role not found: {name}")


@dataclass
class BoardMember:
    user: User
    role_id: str


@dataclass
class Board:
    id: str
    name: str
    members: list[BoardMember] = field(default_factory=list)


def create_board(name: str, user: User | None) -> Board:
    """New board owned by ``user``."""
    if user is None:
        raise MissingActorError("an authenticated user")
    owner = role_by_name("Owner")
    return Board(
        id=f"board-{uuid.uuid4().hex[:12]}",
        name=name,
        members=[BoardMember(user=user, role_id=owner.id)],
    )


class RolePermissions:
    """``can(permission)`` for one user on one board."""

    def __init__(self, board: Board | None, user: User | None) -> None:
        self._board = board
        self._user = user

    def can(self, permission: str) -> bool:
        if self._board is None or self._user is None:
            return False
        member = next(
            (m for m in self._board.members if m.user.id == self._user.id), None
        )
        if member is None:
            return False
        role = next((r for r in ROLES if r.id == member.role_id), None)
        return role is not None and permission in role.permissions


class ReauthGate:
    """Runs sensitive actions only inside a rolling authentication window.

    Outside the window the action is held until ``reauthenticated`` is
    called. Only one action is held at a time; a newer one replaces it.
    """

    def __init__(
        self,
        window_hours: float = 12,
        last_auth_at: datetime | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._window = timedelta(hours=window_hours)
        self._last_auth_at = last_auth_at
        self._clock = clock
        self._deferred: Callable[[], object] | None = None

    @property
    def has_deferred(self) -> bool:
        return self._deferred is not None

    def is_fresh(self) -> bool:
        if self._last_auth_at is None:
            return False
        return self._clock() - self._last_auth_at <= self._window

    def confirm_and_execute(self, action: Callable[[], object]) -> bool:
        """Run ``action`` now if fresh. Returns False when it was deferred."""
        if self.is_fresh():
            action()
            return True
        self._deferred = action
        return False

    def reauthenticated(self) -> None:
        self._last_auth_at = self._clock()
        action, self._deferred = self._deferred, None
        if action is not None:
            action()

    def cancel(self) -> None:
        self._deferred = None
