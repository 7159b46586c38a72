"""
TrackerState 持久化测试
"""

import json

import pytest

from gdpath.tracking.state import TrackerState


class TestTrackerState:
    def test_empty_by_default(self):
        state = TrackerState()
        assert state.scripts == {}
        assert state.resources == set()

    def test_save_and_load(self, tmp_path):
        state_file = tmp_path / ".gdpath_state.json"
        TrackerState(
            scripts={"res://Main.cs": "Main"},
            resources={"res://b.tscn", "res://a.tscn"},
        ).save(state_file)

        data = json.loads(state_file.read_text(encoding="utf-8"))
        assert data["resources"] == ["res://a.tscn", "res://b.tscn"]

        loaded = TrackerState.load(state_file)
        assert loaded.scripts == {"res://Main.cs": "Main"}
        assert loaded.resources == {"res://a.tscn", "res://b.tscn"}

    def test_load_missing(self, tmp_path):
        assert TrackerState.load(tmp_path / "missing.json") is None

    def test_load_corrupt(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            TrackerState.load(state_file)

    def test_load_wrong_shape(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError):
            TrackerState.load(state_file)
