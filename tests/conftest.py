"""Shared test configuration."""

from __future__ import annotations

from datetime import datetime

import pytest

from sprintboard.workflow.models import Epic, Sprint, User, WorkItem


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def alice():
    return User(id="u-alice", name="Alice")


@pytest.fixture
def bob():
    return User(id="u-bob", name="Bob")


@pytest.fixture
def make_item(alice):
    def _make(item_id: str = "PROJ-1", **fields) -> WorkItem:
        fields.setdefault("title", f"Item {item_id}")
        fields.setdefault("reporter", alice)
        return WorkItem(id=item_id, board_id="board-1", **fields)

    return _make


@pytest.fixture
def make_sprint():
    def _make(sprint_id: str = "s-1", **fields) -> Sprint:
        fields.setdefault("number", 1)
        fields.setdefault("name", f"Sprint {sprint_id}")
        fields.setdefault("start_at", datetime(2024, 1, 1))
        fields.setdefault("end_at", datetime(2024, 1, 14))
        return Sprint(id=sprint_id, board_id="board-1", **fields)

    return _make


@pytest.fixture
def make_epic():
    def _make(epic_id: str = "E1", **fields) -> Epic:
        fields.setdefault("name", f"Epic {epic_id}")
        fields.setdefault("color", "#486966")
        return Epic(id=epic_id, board_id="board-1", **fields)

    return _make
