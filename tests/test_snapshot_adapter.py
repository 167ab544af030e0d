"""Tests for the snapshot-backed adapter."""

from datetime import datetime

import pytest

from sprintboard.adapters.snapshot import SnapshotAdapter
from sprintboard.storage.snapshot import SnapshotStore
from sprintboard.workflow.models import SprintDraft, SprintState, Status, User

NOW = datetime(2024, 1, 5, 9, 0)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path)


@pytest.fixture
def alice():
    return User(id="u-alice", name="Alice")


def _open(store, alice):
    return SnapshotAdapter(store, user=alice, clock=lambda: NOW)


class TestPersistence:
    @pytest.mark.asyncio
    async def test_changes_survive_reopen(self, store, alice):
        adapter = _open(store, alice)
        sprint = await adapter.save_sprint(
            SprintDraft("Sprint 1", datetime(2024, 1, 1), datetime(2024, 1, 14))
        )
        epic = await adapter.create_epic("Auth")
        item = await adapter.create_work_item("Login", epic_id=epic.id, sprint_id=sprint.id)
        await adapter.change_status(item.id, Status.IN_PROGRESS)

        reopened = _open(store, alice)
        assert (await reopened.get_sprint(sprint.id)).name == "Sprint 1"
        assert (await reopened.get_epic(epic.id)).name == "Auth"
        loaded = await reopened.get_work_item(item.id)
        assert loaded.status is Status.IN_PROGRESS
        assert loaded.sprint_id == sprint.id
        assert not reopened.migrated

    @pytest.mark.asyncio
    async def test_id_counters_resume(self, store, alice):
        adapter = _open(store, alice)
        await adapter.create_work_item("One")
        await adapter.create_work_item("Two")
        await adapter.create_epic("Epic")

        reopened = _open(store, alice)
        assert (await reopened.create_work_item("Three")).id == "PROJ-3"
        assert (await reopened.create_epic("Another")).id == "epic-2"

    @pytest.mark.asyncio
    async def test_tick_is_persisted(self, store, alice):
        adapter = _open(store, alice)
        sprint = await adapter.save_sprint(
            SprintDraft("Sprint 1", datetime(2024, 1, 1), datetime(2024, 1, 14))
        )
        await adapter.tick(datetime(2024, 1, 2))
        assert (await _open(store, alice).get_sprint(sprint.id)).state is SprintState.ACTIVE

    def test_empty_directory(self, store, alice):
        adapter = _open(store, alice)
        assert adapter.work_items == []
        assert adapter.sprints == []
        assert not adapter.migrated


class TestMigrationOnLoad:
    def test_legacy_items_migrated_and_saved(self, store, alice):
        store.save("sprints", [{
            "id": "s-1", "board_id": "board-1", "number": 1, "name": "Sprint 1",
            "start_at": "2024-01-01T00:00:00", "end_at": "2024-01-14T00:00:00",
        }])
        store.save("workItems", [{
            "id": "PROJ-1", "board_id": "board-1", "title": "Legacy",
            "reporter": {"id": "u-alice", "name": "Alice"}, "sprint": "Sprint 1",
        }])

        adapter = _open(store, alice)
        assert adapter.migrated
        assert adapter.work_items[0].sprint_id == "s-1"

        raw = store.load("workItems", [])
        assert "sprint" not in raw[0]
        assert raw[0]["sprint_binding"] == "manual"
        assert not _open(store, alice).migrated
