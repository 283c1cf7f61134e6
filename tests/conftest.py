# tests/conftest.py
import os
import tempfile
from pathlib import Path

# Keep the global config away from the real data directory
os.environ.setdefault("APPCATALOG_DATA_DIR", tempfile.mkdtemp(prefix="appcatalog-tests-"))

import pytest

from appcatalog.core.database import AppDatabase
from appcatalog.core.game import library_from_ids
from appcatalog.core.models import (
    AppPlatforms,
    AppType,
    DatabaseEntry,
    LanguageSupport,
    StoreLanguage,
    VRSupport,
)
from appcatalog.core.snapshot import SnapshotGateway


@pytest.fixture
def database() -> AppDatabase:
    """Empty database in English."""
    return AppDatabase(language=StoreLanguage.EN)


@pytest.fixture
def sample_entries() -> list[DatabaseEntry]:
    """A base game with a DLC and a soundtrack, another game and a sentinel record."""
    return [
        DatabaseEntry(
            app_id=440,
            name="Team Fortress 2",
            app_type=AppType.GAME,
            platforms=AppPlatforms.WINDOWS | AppPlatforms.LINUX | AppPlatforms.MAC,
            developers=["Valve"],
            publishers=["Valve"],
            genres=["Action", "Free to Play"],
            flags=["Multi-player", "Steam Trading Cards"],
            tags=["Free to Play", "Hero Shooter", "Multiplayer", "FPS"],
            language_support=LanguageSupport(
                interface=["English", "German"], subtitles=["English"], full_audio=["English"]
            ),
            steam_release_date="10 Oct, 2007",
            hltb_main=600,
            hltb_extras=1200,
            hltb_completionist=6000,
            last_store_scrape=1700000000,
        ),
        DatabaseEntry(
            app_id=441,
            name="Team Fortress 2 - Soundtrack",
            app_type=AppType.MUSIC,
            parent_id=440,
        ),
        DatabaseEntry(
            app_id=620,
            name="Portal 2",
            app_type=AppType.GAME,
            developers=["Valve"],
            publishers=["Valve", "Electronic Arts"],
            genres=["Action", "Adventure"],
            tags=["Puzzle", "Co-op", "First-Person", "Action"],
            vr_support=VRSupport(headsets=["Valve Index"]),
            language_support=LanguageSupport(interface=["english", "French"]),
            steam_release_date="Apr 18, 2011",
        ),
        DatabaseEntry(app_id=-1, name="Sentinel", tags=["keep"], genres=["Keep"]),
    ]


@pytest.fixture
def populated_database(database: AppDatabase, sample_entries: list[DatabaseEntry]) -> AppDatabase:
    for entry in sample_entries:
        database.add_entry(entry)
    return database


@pytest.fixture
def gateway(tmp_path: Path, populated_database: AppDatabase) -> SnapshotGateway:
    """Gateway writing to a temp snapshot file."""
    return SnapshotGateway(tmp_path / "db.json", populated_database)


@pytest.fixture
def library():
    """The user's library: TF2, its soundtrack and Portal 2 (hidden)."""
    return library_from_ids([440, 441, 620], hidden=[620])

