"""Tests for YAML board configuration."""

from datetime import datetime

import pytest

from sprintboard.access import ReauthGate
from sprintboard.config import (
    BoardConfig,
    load_config,
    make_dispatcher,
    make_reauth_gate,
    make_sprint_draft,
)
from sprintboard.notifications.dispatcher import CoalescingDispatcher


class TestLoadConfig:
    def test_none_gives_defaults(self):
        assert load_config(None) == BoardConfig()

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "board.yaml") == BoardConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("")
        assert load_config(path) == BoardConfig()

    def test_overrides(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("wip_limit: 5\nreauth_window_hours: 1\nstorage_namespace: acme.\n")
        config = load_config(path)
        assert config.wip_limit == 5
        assert config.reauth_window_hours == 1
        assert config.storage_namespace == "acme."
        assert config.tick_interval_seconds == 60

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("wip_limt: 5\n")
        with pytest.raises(ValueError, match="wip_limt"):
            load_config(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "board.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


class TestFactories:
    def test_reauth_gate_uses_window(self):
        now = datetime(2024, 1, 1, 12)
        config = BoardConfig(reauth_window_hours=1)
        gate = make_reauth_gate(config, last_auth_at=datetime(2024, 1, 1, 10), clock=lambda: now)
        assert isinstance(gate, ReauthGate)
        assert not gate.is_fresh()

    def test_dispatcher_uses_window(self):
        dispatcher = make_dispatcher(BoardConfig(coalesce_window_seconds=1.5), "u-alice")
        assert isinstance(dispatcher, CoalescingDispatcher)

    def test_sprint_draft_uses_default_length(self):
        draft = make_sprint_draft(BoardConfig(default_sprint_days=7), now=datetime(2024, 3, 1))
        assert draft.end_at == datetime(2024, 3, 8)
        assert draft.name == ""
