"""Tests for the epic progress calculator."""

import pytest

from sprintboard.engine.progress import compute_progress, enrich_epics, open_child_ids
from sprintboard.workflow.models import Status


class TestComputeProgress:
    def test_no_children_all_zero(self, make_epic, make_item):
        result = compute_progress(make_epic(), [make_item(epic_id="OTHER")])
        assert result.open_items_count == 0
        assert result.total_items_count == 0
        assert result.total_estimation == 0
        assert result.percent_done_weighted == 0

    def test_weighted_by_estimation(self, make_epic, make_item):
        items = [
            make_item("A", epic_id="E1", estimation_points=2, status=Status.DONE),
            make_item("B", epic_id="E1", estimation_points=3),
            make_item("C", epic_id="E1", estimation_points=0, status=Status.DONE),
            make_item("D", epic_id="E1", estimation_points=5),
        ]
        result = compute_progress(make_epic(), items)
        assert result.total_items_count == 4
        assert result.open_items_count == 2
        assert result.total_estimation == 10
        assert result.done_estimation == 2
        assert result.percent_done_weighted == pytest.approx(20)

    def test_falls_back_to_item_count(self, make_epic, make_item):
        items = [
            make_item("A", epic_id="E1", status=Status.DONE),
            make_item("B", epic_id="E1", status=Status.DONE),
            make_item("C", epic_id="E1"),
            make_item("D", epic_id="E1"),
        ]
        result = compute_progress(make_epic(), items)
        assert result.total_estimation == 0
        assert result.percent_done_weighted == pytest.approx(50)

    def test_missing_estimate_treated_as_zero(self, make_epic, make_item):
        items = [
            make_item("A", epic_id="E1", estimation_points=None, status=Status.DONE),
            make_item("B", epic_id="E1", estimation_points=4),
        ]
        result = compute_progress(make_epic(), items)
        assert result.total_estimation == 4
        assert result.percent_done_weighted == 0

    def test_pure(self, make_epic, make_item):
        epic = make_epic()
        items = [make_item("A", epic_id="E1", estimation_points=1)]
        assert compute_progress(epic, items) == compute_progress(epic, items)
        assert epic.status.value == "active"


class TestEnrichEpics:
    def test_one_row_per_epic(self, make_epic, make_item):
        epics = [make_epic("E1"), make_epic("E2")]
        items = [make_item("A", epic_id="E2")]
        rows = enrich_epics(epics, items)
        assert [r.id for r in rows] == ["E1", "E2"]
        assert rows[1].open_items_count == 1

    def test_open_child_ids(self, make_item):
        items = [
            make_item("A", epic_id="E1"),
            make_item("B", epic_id="E1", status=Status.DONE),
            make_item("C", epic_id="E2"),
        ]
        assert open_child_ids("E1", items) == ["A"]
