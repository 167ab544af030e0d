"""Tests for boards, role permissions and the re-authentication gate."""

from datetime import datetime, timedelta

import pytest

from sprintboard.access import (
    Board,
    BoardMember,
    ReauthGate,
    RolePermissions,
    create_board,
    role_by_name,
)
from sprintboard.workflow.exceptions import MissingActorError


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestCreateBoard:
    def test_creator_is_owner(self, alice):
        board = create_board("Platform", alice)
        assert board.id.startswith("board-")
        assert board.members[0].user == alice
        assert board.members[0].role_id == role_by_name("Owner").id

    def test_requires_user(self):
        with pytest.raises(MissingActorError):
            create_board("Platform", None)


class TestRolePermissions:
    def test_owner_can_manage_sprints(self, alice):
        board = create_board("Platform", alice)
        assert RolePermissions(board, alice).can("sprint.manage")

    def test_member_cannot_manage_sprints(self, alice, bob):
        board = Board("b1", "Platform", [BoardMember(bob, role_by_name("Member").id)])
        perms = RolePermissions(board, bob)
        assert perms.can("item.edit")
        assert not perms.can("sprint.manage")

    def test_non_member_cannot_do_anything(self, alice, bob):
        board = create_board("Platform", alice)
        assert not RolePermissions(board, bob).can("item.comment")

    def test_no_board(self, alice):
        assert not RolePermissions(None, alice).can("item.comment")

    def test_unknown_role(self):
        with pytest.raises(KeyError, match="Role not found"):
            role_by_name("Janitor")


class TestReauthGate:
    def test_fresh_runs_immediately(self):
        clock = FakeClock(datetime(2024, 1, 1, 12))
        gate = ReauthGate(12, last_auth_at=datetime(2024, 1, 1, 8), clock=clock)
        calls = []
        assert gate.confirm_and_execute(lambda: calls.append("run"))
        assert calls == ["run"]
        assert not gate.has_deferred

    def test_stale_defers_until_reauth(self):
        clock = FakeClock(datetime(2024, 1, 2, 12))
        gate = ReauthGate(12, last_auth_at=datetime(2024, 1, 1, 8), clock=clock)
        calls = []
        assert not gate.confirm_and_execute(lambda: calls.append("run"))
        assert calls == []
        assert gate.has_deferred

        gate.reauthenticated()
        assert calls == ["run"]
        assert not gate.has_deferred
        assert gate.is_fresh()

    def test_never_authenticated_is_stale(self):
        assert not ReauthGate().is_fresh()

    def test_window_boundary_is_inclusive(self):
        last = datetime(2024, 1, 1, 0)
        clock = FakeClock(last + timedelta(hours=12))
        assert ReauthGate(12, last_auth_at=last, clock=clock).is_fresh()

    def test_cancel_drops_action(self):
        gate = ReauthGate()
        calls = []
        gate.confirm_and_execute(lambda: calls.append("run"))
        gate.cancel()
        gate.reauthenticated()
        assert calls == []

    def test_newer_action_replaces_held_one(self):
        gate = ReauthGate()
        calls = []
        gate.confirm_and_execute(lambda: calls.append("first"))
        gate.confirm_and_execute(lambda: calls.append("second"))
        gate.reauthenticated()
        assert calls == ["second"]
