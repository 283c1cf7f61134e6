# tests/unit/test_utils/test_json_utils.py

"""Tests for the JSON file helpers."""

import json
from unittest.mock import patch

import pytest

from appcatalog.utils.json_utils import load_json, read_json, save_json, write_json_atomic


class TestReadJson:
    """Tests for the strict read_json()."""

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_json(tmp_path / "missing.json")

    def test_invalid_json_raises_value_error(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("[1,", encoding="utf-8")
        with pytest.raises(ValueError):
            read_json(path)


class TestLoadJson:
    """Tests for load_json()."""

    def test_missing_file_returns_empty_dict(self, tmp_path):
        assert load_json(tmp_path / "missing.json") == {}

    def test_missing_file_returns_default_silently(self, tmp_path, caplog):
        assert load_json(tmp_path / "missing.json", default=[]) == []
        assert caplog.text == ""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"a": [1, 2]}', encoding="utf-8")
        assert load_json(path) == {"a": [1, 2]}

    def test_invalid_json_returns_default(self, tmp_path, caplog):
        path = tmp_path / "data.json"
        path.write_text("{broken", encoding="utf-8")
        assert load_json(path, default={"x": 1}) == {"x": 1}
        assert "Failed to load JSON" in caplog.text


class TestSaveJson:
    """Tests for save_json()."""

    def test_writes_and_creates_parents(self, tmp_path):
        path = tmp_path / "a" / "b" / "settings.json"
        assert save_json(path, {"k": "v"}) is True
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_unserializable_returns_false(self, tmp_path):
        path = tmp_path / "settings.json"
        assert save_json(path, {"k": object()}) is False
        assert not path.exists()


class TestWriteJsonAtomic:
    """Tests for write_json_atomic()."""

    def test_replaces_existing_file(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text('{"old": true}', encoding="utf-8")
        write_json_atomic(path, {"new": True})
        assert json.loads(path.read_text(encoding="utf-8")) == {"new": True}

    def test_keeps_non_ascii(self, tmp_path):
        path = tmp_path / "db.json"
        write_json_atomic(path, {"name": "Pokémon"})
        assert "Pokémon" in path.read_text(encoding="utf-8")

    def test_failed_replace_keeps_old_file_and_cleans_up(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text('{"old": true}', encoding="utf-8")

        with patch("appcatalog.utils.json_utils.os.replace", side_effect=OSError("busy")):
            with pytest.raises(OSError):
                write_json_atomic(path, {"new": True})

        assert json.loads(path.read_text(encoding="utf-8")) == {"old": True}
        assert [p.name for p in tmp_path.iterdir()] == ["db.json"]

    def test_serialization_error_propagates(self, tmp_path):
        with pytest.raises(TypeError):
            write_json_atomic(tmp_path / "db.json", {"bad": {1, 2}})
        assert list(tmp_path.iterdir()) == []
