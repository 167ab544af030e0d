"""Tests for sprint membership inheritance."""

from __future__ import annotations

from datetime import datetime

import pytest

from sprintboard.engine.inheritance import apply_membership_policy, diff_epic_ids
from sprintboard.workflow.models import SprintBinding, SprintDraft, Status


@pytest.fixture
def edit(make_sprint):
    """Original sprint S with epic_ids ``before``, edited to ``after``."""

    def _edit(before, after, items):
        original = make_sprint("S", epic_ids=list(before))
        edited = make_sprint("S", epic_ids=list(after))
        return apply_membership_policy(edited, original, items)

    return _edit


def _by_id(result):
    return {item.id: item for item in result.work_items}


class TestDiff:
    def test_added_and_removed(self):
        diff = diff_epic_ids(["E1", "E2"], ["E1", "E3"])
        assert diff.added == {"E2"}
        assert diff.removed == {"E3"}

    def test_disjoint_by_construction(self):
        diff = diff_epic_ids(["E1", "E2", "E2"], ["E2", "E3"])
        assert not diff.added & diff.removed

    def test_empty_diff_is_falsy(self):
        assert not diff_epic_ids(["E1"], ["E1"])


class TestInclusion:
    def test_unassigned_open_item_is_claimed(self, edit, make_item):
        item = make_item("A", epic_id="E2")
        result = edit({"E1"}, {"E1", "E2"}, [item])
        claimed = _by_id(result)["A"]
        assert claimed.sprint_id == "S"
        assert claimed.sprint_binding is SprintBinding.AUTO
        assert result.assigned_item_ids == ["A"]

    def test_manual_item_in_other_sprint_untouched(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_id="OTHER", sprint_binding=SprintBinding.MANUAL)
        result = edit({"E1"}, {"E1", "E2"}, [item])
        assert _by_id(result)["A"] is item
        assert not result.changed

    def test_auto_item_in_other_sprint_is_claimed(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_id="OTHER", sprint_binding=SprintBinding.AUTO)
        result = edit({"E1"}, {"E1", "E2"}, [item])
        assert _by_id(result)["A"].sprint_id == "S"

    def test_done_item_untouched(self, edit, make_item):
        item = make_item("A", epic_id="E2", status=Status.DONE)
        result = edit({"E1"}, {"E1", "E2"}, [item])
        assert _by_id(result)["A"] is item

    def test_unassigned_manual_item_is_claimed_and_becomes_auto(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_binding=SprintBinding.MANUAL)
        result = edit(set(), {"E2"}, [item])
        assert _by_id(result)["A"].sprint_binding is SprintBinding.AUTO


class TestExclusion:
    def test_auto_item_in_this_sprint_is_released(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_id="S", sprint_binding=SprintBinding.AUTO)
        result = edit({"E1", "E2"}, {"E1"}, [item])
        released = _by_id(result)["A"]
        assert released.sprint_id is None
        assert released.sprint_binding is SprintBinding.AUTO
        assert result.released_item_ids == ["A"]

    def test_manual_item_stays(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_id="S", sprint_binding=SprintBinding.MANUAL)
        result = edit({"E1", "E2"}, {"E1"}, [item])
        assert _by_id(result)["A"] is item

    def test_auto_item_in_other_sprint_stays(self, edit, make_item):
        item = make_item("A", epic_id="E2", sprint_id="OTHER", sprint_binding=SprintBinding.AUTO)
        result = edit({"E1", "E2"}, {"E1"}, [item])
        assert _by_id(result)["A"] is item

    def test_done_item_stays(self, edit, make_item):
        item = make_item(
            "A", epic_id="E2", sprint_id="S", sprint_binding=SprintBinding.AUTO, status=Status.DONE
        )
        result = edit({"E1", "E2"}, {"E1"}, [item])
        assert _by_id(result)["A"] is item


class TestUntouched:
    def test_item_without_epic(self, edit, make_item):
        item = make_item("A", sprint_id="S", sprint_binding=SprintBinding.AUTO)
        result = edit({"E1"}, set(), [item])
        assert _by_id(result)["A"] is item

    def test_item_of_unchanged_epic(self, edit, make_item):
        item = make_item("A", epic_id="E1")
        result = edit({"E1"}, {"E1", "E2"}, [item])
        assert _by_id(result)["A"] is item

    def test_no_diff_returns_input_list(self, edit, make_item):
        items = [make_item("A", epic_id="E1")]
        result = edit({"E1"}, {"E1"}, items)
        assert result.work_items is items

    def test_does_not_mutate_inputs(self, edit, make_item):
        item = make_item("A", epic_id="E2")
        edit(set(), {"E2"}, [item])
        assert item.sprint_id is None


class TestBatch:
    def test_add_and_remove_in_one_call(self, edit, make_item):
        items = [
            make_item("IN", epic_id="E2"),
            make_item("OUT", epic_id="E1", sprint_id="S", sprint_binding=SprintBinding.AUTO),
        ]
        result = edit({"E1"}, {"E2"}, items)
        by_id = _by_id(result)
        assert by_id["IN"].sprint_id == "S"
        assert by_id["OUT"].sprint_id is None

    def test_new_sprint_uses_empty_original(self, make_item):
        draft = SprintDraft(
            id="NEW", name="N", start_at=datetime(2024, 1, 1), end_at=datetime(2024, 1, 14), epic_ids=["E1"]
        )
        result = apply_membership_policy(draft, None, [make_item("A", epic_id="E1")])
        assert result.work_items[0].sprint_id == "NEW"

    def test_requires_sprint_id(self, make_item):
        draft = SprintDraft(name="N", start_at=datetime(2024, 1, 1), end_at=datetime(2024, 1, 14), epic_ids=["E1"])
        with pytest.raises(ValueError):
            apply_membership_policy(draft, None, [])

    def test_retoggle_across_saves_turns_manual_into_auto(self, make_sprint, make_item):
        """Removing then re-adding an epic in separate saves rebinds a manual item."""
        item = make_item("A", epic_id="E1", sprint_binding=SprintBinding.MANUAL)
        s0 = make_sprint("S", epic_ids=["E1"])
        s1 = make_sprint("S", epic_ids=[])
        s2 = make_sprint("S", epic_ids=["E1"])
        after_remove = apply_membership_policy(s1, s0, [item]).work_items
        assert after_remove[0] is item
        after_add = apply_membership_policy(s2, s1, after_remove).work_items
        assert after_add[0].sprint_id == "S"
        assert after_add[0].sprint_binding is SprintBinding.AUTO
