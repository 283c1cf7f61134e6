"""Tests for SnapshotGateway: round trip, failure handling and the default gateway."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from appcatalog.core import snapshot as snapshot_module
from appcatalog.core.database import AppDatabase
from appcatalog.core.errors import SnapshotReadError, SnapshotWriteError
from appcatalog.core.models import AppType, DatabaseEntry, StoreLanguage
from appcatalog.core.snapshot import SnapshotGateway, get_gateway, open_snapshot, reset_gateway
from appcatalog.services.aggregate_cache import AggregateSlot, SlotState


class TestRoundTrip:
    """load(save(S)) reproduces every persisted field."""

    def test_round_trip_preserves_entries(self, gateway: SnapshotGateway, tmp_path: Path) -> None:
        gateway.database.language = StoreLanguage.DE
        gateway.database.last_hltb_update = 1700000123
        gateway.save()

        restored = SnapshotGateway(gateway.path)
        count = restored.load()

        assert count == len(gateway.database)
        assert restored.database.apps == gateway.database.apps
        assert restored.database.language is StoreLanguage.DE
        assert restored.database.last_hltb_update == 1700000123

    def test_round_trip_keeps_sequence_order_and_none(self, tmp_path: Path) -> None:
        database = AppDatabase()
        database.add_entry(DatabaseEntry(app_id=1, tags=["z", "a", "m"], genres=None, flags=[]))
        gateway = SnapshotGateway(tmp_path / "db.json", database)
        gateway.save()

        restored = SnapshotGateway(gateway.path)
        restored.load()
        entry = restored.database.get_entry(1)
        assert entry.tags == ["z", "a", "m"]
        assert entry.genres is None
        assert entry.flags == []

    def test_round_trip_keeps_combined_type(self, tmp_path: Path) -> None:
        database = AppDatabase()
        database.add_entry(DatabaseEntry(app_id=1, app_type=AppType.GAME | AppType.DEMO))
        SnapshotGateway(tmp_path / "db.json", database).save()

        restored = SnapshotGateway(tmp_path / "db.json")
        restored.load()
        assert restored.database.get_entry(1).app_type == AppType.GAME | AppType.DEMO

    def test_version_one_type_names_still_load(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(
            json.dumps({"version": 1, "language": "en", "apps": {"5": {"app_id": 5, "app_type": "dlc"}}}),
            encoding="utf-8",
        )
        restored = SnapshotGateway(path)
        restored.load()
        assert restored.database.get_entry(5).app_type == AppType.DLC

    def test_aggregates_not_persisted(self, gateway: SnapshotGateway) -> None:
        gateway.database.aggregates.all_genres()
        gateway.save()

        data = json.loads(gateway.path.read_text(encoding="utf-8"))
        assert set(data) == {"version", "language", "last_hltb_update", "apps"}

    def test_load_resets_aggregates(self, gateway: SnapshotGateway) -> None:
        gateway.save()
        gateway.database.aggregates.all_genres()
        assert gateway.database.aggregates.state(AggregateSlot.GENRES) is SlotState.COMPUTED

        gateway.load()
        assert gateway.database.aggregates.state(AggregateSlot.GENRES) is SlotState.STALE

    def test_load_keeps_mapping_identity(self, gateway: SnapshotGateway) -> None:
        """Services hold the apps dict by reference, so load must refill it in place."""
        gateway.save()
        apps_before = gateway.database.apps
        gateway.load()
        assert gateway.database.apps is apps_before
        assert gateway.database.resolver.get_developers(441) == ["Valve"]


class TestLoadFailures:
    """Failed loads raise SnapshotReadError and commit nothing."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        gateway = SnapshotGateway(tmp_path / "missing.json")
        with pytest.raises(SnapshotReadError):
            gateway.load()

    def test_invalid_json_leaves_state(self, gateway: SnapshotGateway) -> None:
        gateway.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotReadError):
            gateway.load()
        assert gateway.database.get_name(440) == "Team Fortress 2"

    def test_partially_bad_entry_commits_nothing(self, gateway: SnapshotGateway) -> None:
        document = {
            "version": 1,
            "language": "fr",
            "last_hltb_update": 0,
            "apps": {
                "1": {"app_id": 1, "name": "Fine"},
                "2": {"app_id": 2, "tags": "not-a-list"},
            },
        }
        gateway.path.write_text(json.dumps(document), encoding="utf-8")

        with pytest.raises(SnapshotReadError):
            gateway.load()
        assert not gateway.database.contains(1)
        assert gateway.database.language is StoreLanguage.EN

    def test_mismatched_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"apps": {"5": {"app_id": 6}}}), encoding="utf-8")
        with pytest.raises(SnapshotReadError):
            SnapshotGateway(path).load()

    def test_unknown_language_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"language": "klingon", "apps": {}}), encoding="utf-8")
        with pytest.raises(SnapshotReadError):
            SnapshotGateway(path).load()

    def test_newer_version_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"version": 99, "apps": {}}), encoding="utf-8")
        with pytest.raises(SnapshotReadError):
            SnapshotGateway(path).load()


class TestSaveFailures:
    """Failed saves raise SnapshotWriteError and keep the old file."""

    def test_write_error_keeps_previous_snapshot(self, gateway: SnapshotGateway) -> None:
        gateway.save()
        before = gateway.path.read_text(encoding="utf-8")
        gateway.database.upsert_from_catalog(12345, "New")

        with patch("appcatalog.utils.json_utils.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(SnapshotWriteError):
                gateway.save()

        assert gateway.path.read_text(encoding="utf-8") == before
        assert list(gateway.path.parent.glob(".db.json.*.tmp")) == []

    def test_invalid_entry_type_raises_write_error(self, gateway: SnapshotGateway) -> None:
        gateway.save()
        before = gateway.path.read_text(encoding="utf-8")
        gateway.database.get_entry(440).app_type = None  # type: ignore[assignment]

        with pytest.raises(SnapshotWriteError):
            gateway.save()

        assert gateway.path.read_text(encoding="utf-8") == before

    def test_save_creates_parent_directory(self, tmp_path: Path, populated_database: AppDatabase) -> None:
        gateway = SnapshotGateway(tmp_path / "nested" / "dir" / "db.json", populated_database)
        gateway.save()
        assert gateway.path.exists()


class TestOpenSnapshot:
    """Tests for open_snapshot() and the process-wide gateway."""

    def test_open_without_file_is_empty(self, tmp_path: Path) -> None:
        gateway = open_snapshot(tmp_path / "db.json")
        assert len(gateway.database) == 0
        assert not gateway.path.exists()

    def test_open_loads_existing(self, gateway: SnapshotGateway) -> None:
        gateway.save()
        reopened = open_snapshot(gateway.path)
        assert reopened.database.get_entry(440).app_type == AppType.GAME

    def test_default_gateway_is_singleton(self, tmp_path: Path) -> None:
        reset_gateway()
        with patch("appcatalog.config.config") as fake_config:
            fake_config.SNAPSHOT_FILE = tmp_path / "db.json"
            first = get_gateway()
            second = get_gateway()
        try:
            assert first is second
            assert first.path == tmp_path / "db.json"
        finally:
            reset_gateway()
        assert snapshot_module._gateway is None
