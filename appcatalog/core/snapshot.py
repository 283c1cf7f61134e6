# appcatalog/core/snapshot.py

"""Persistence of the whole app database as one JSON snapshot.

The snapshot holds every entry, the active store language and the last HLTB
update time. Aggregate slots are derived data and are never written; they
are recomputed on first access after a load.

Loads parse into a fresh mapping and only swap it in once everything has
validated, so a failed load leaves the in-memory database untouched. Saves
go through a temp file, so a failed save leaves the previous snapshot intact.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from appcatalog.core.database import AppDatabase
from appcatalog.core.errors import SnapshotReadError, SnapshotWriteError
from appcatalog.core.models import DatabaseEntry, StoreLanguage
from appcatalog.utils.json_utils import read_json, write_json_atomic

logger = logging.getLogger("appcatalog.snapshot")

__all__ = ["SNAPSHOT_VERSION", "SnapshotGateway", "get_gateway", "open_snapshot", "reset_gateway"]

SNAPSHOT_VERSION = 2


def database_to_dict(database: AppDatabase) -> dict[str, Any]:
    """Builds the JSON document for a database."""
    return {
        "version": SNAPSHOT_VERSION,
        "language": database.language.value,
        "last_hltb_update": database.last_hltb_update,
        "apps": {str(app_id): entry.to_dict() for app_id, entry in database.apps.items()},
    }


def database_from_dict(data: Any) -> tuple[dict[int, DatabaseEntry], StoreLanguage, int]:
    """Validates a snapshot document.

    Returns:
        Tuple of (apps, language, last_hltb_update).

    Raises:
        KeyError, TypeError, ValueError: If the document is malformed.
    """
    if not isinstance(data, dict):
        raise TypeError("snapshot root is not an object")
    version = int(data.get("version", SNAPSHOT_VERSION))
    if version > SNAPSHOT_VERSION:
        raise ValueError(f"snapshot version {version} is newer than supported {SNAPSHOT_VERSION}")

    raw_apps = data.get("apps", {})
    if not isinstance(raw_apps, dict):
        raise TypeError("'apps' is not an object")

    apps: dict[int, DatabaseEntry] = {}
    for key, raw_entry in raw_apps.items():
        entry = DatabaseEntry.from_dict(raw_entry)
        if entry.app_id != int(key):
            raise ValueError(f"entry key {key} does not match app_id {entry.app_id}")
        apps[entry.app_id] = entry

    language = StoreLanguage(data.get("language", StoreLanguage.EN.value))
    last_hltb_update = int(data.get("last_hltb_update", 0))
    return apps, language, last_hltb_update


class SnapshotGateway:
    """Loads and saves an ``AppDatabase`` at a fixed path.

    Both operations hold the database lock for their whole duration.

    Args:
        path: Snapshot file (usually ``db.json`` in the data directory).
        database: Database to persist; a new empty one if omitted.
    """

    def __init__(self, path: Path, database: AppDatabase | None = None) -> None:
        self.path = path
        self.database = database if database is not None else AppDatabase()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> int:
        """Replaces the in-memory state with the snapshot on disk.

        Returns:
            Number of entries loaded.

        Raises:
            SnapshotReadError: If the file cannot be read or parsed. The
                in-memory database is left as it was.
        """
        with self.database.lock:
            try:
                apps, language, last_hltb_update = database_from_dict(read_json(self.path))
            except OSError as exc:
                logger.error("Failed to read snapshot %s: %s", self.path, exc)
                raise SnapshotReadError("Cannot read snapshot", self.path) from exc
            except (KeyError, TypeError, ValueError) as exc:
                logger.error("Failed to parse snapshot %s: %s", self.path, exc)
                raise SnapshotReadError("Malformed snapshot", self.path) from exc

            self.database.replace_contents(apps, language, last_hltb_update)

        logger.info("Loaded %d entries from %s", len(apps), self.path)
        return len(apps)

    def save(self) -> None:
        """Writes the full in-memory state to the snapshot path.

        Raises:
            SnapshotWriteError: If serialization or writing fails; the previous
                snapshot on disk is left untouched.
        """
        with self.database.lock:
            try:
                write_json_atomic(self.path, database_to_dict(self.database))
            except (AttributeError, OSError, TypeError, ValueError) as exc:
                logger.error("Failed to save snapshot %s: %s", self.path, exc)
                raise SnapshotWriteError("Cannot write snapshot", self.path) from exc

        logger.info("Saved %d entries to %s", len(self.database), self.path)


def open_snapshot(path: Path) -> SnapshotGateway:
    """Creates a gateway for ``path``, loading the snapshot if one exists.

    Raises:
        SnapshotReadError: If an existing snapshot cannot be loaded.
    """
    gateway = SnapshotGateway(path)
    if gateway.exists():
        gateway.load()
    else:
        logger.info("No snapshot at %s, starting with an empty database", path)
    return gateway


_gateway: SnapshotGateway | None = None
_gateway_lock = threading.Lock()


def get_gateway() -> SnapshotGateway:
    """Process-wide default gateway at ``config.SNAPSHOT_FILE``.

    Created on first access (double-checked under a lock). Prefer passing an
    explicit gateway from ``open_snapshot`` where possible.
    """
    global _gateway
    if _gateway is None:
        with _gateway_lock:
            if _gateway is None:
                from appcatalog.config import config

                _gateway = open_snapshot(config.SNAPSHOT_FILE)
    return _gateway


def reset_gateway() -> None:
    """Drops the process-wide gateway (next access reloads from disk)."""
    global _gateway
    with _gateway_lock:
        _gateway = None
