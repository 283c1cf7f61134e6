"""
Configuration - data paths, feed endpoints and tuning knobs.

Settings are read from settings.json in the data directory, then
overridden by environment variables (a local .env file is honoured).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from appcatalog.utils.json_utils import load_json, save_json

logger = logging.getLogger("appcatalog.config")


__all__ = ["Config", "config"]


@dataclass
class Config:
    """
    Central configuration handling for the application.
    Manages paths, feed URLs and defaults for the scoring and resolution engines.
    """

    DATA_DIR: Path = Path.home() / ".local" / "share" / "appcatalog"
    SNAPSHOT_NAME: str = "db.json"
    SETTINGS_NAME: str = "settings.json"

    # Store language ("system" resolves from the host locale)
    STORE_LANGUAGE: str = "en"

    # Feeds
    APP_LIST_URL: str = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"
    HLTB_URL: str = "https://www.howlongtobeatsteam.com/api/games/library/cached/all"
    REQUEST_TIMEOUT: float = 30.0
    INCLUDE_IMPUTED_TIMES: bool = True

    # Engines
    RESOLUTION_DEPTH: int = 3
    TAGS_PER_GAME: int = 0
    TAG_WEIGHT_FACTOR: float = 1.0

    def __post_init__(self):
        """Apply .env / environment overrides and load persisted settings."""
        load_dotenv()

        env_dir = os.getenv("APPCATALOG_DATA_DIR")
        if env_dir:
            self.DATA_DIR = Path(env_dir).expanduser()

        self._load_settings()

        env_lang = os.getenv("APPCATALOG_LANGUAGE")
        if env_lang:
            self.STORE_LANGUAGE = env_lang

    @property
    def SNAPSHOT_FILE(self) -> Path:
        return self.DATA_DIR / self.SNAPSHOT_NAME

    @property
    def SETTINGS_FILE(self) -> Path:
        return self.DATA_DIR / self.SETTINGS_NAME

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        data = load_json(self.SETTINGS_FILE)
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed settings file %s", self.SETTINGS_FILE)
            return

        self.STORE_LANGUAGE = data.get("store_language", self.STORE_LANGUAGE)
        self.REQUEST_TIMEOUT = data.get("request_timeout", self.REQUEST_TIMEOUT)
        self.INCLUDE_IMPUTED_TIMES = data.get("include_imputed_times", self.INCLUDE_IMPUTED_TIMES)
        self.RESOLUTION_DEPTH = data.get("resolution_depth", self.RESOLUTION_DEPTH)
        self.TAGS_PER_GAME = data.get("tags_per_game", self.TAGS_PER_GAME)
        self.TAG_WEIGHT_FACTOR = data.get("tag_weight_factor", self.TAG_WEIGHT_FACTOR)

    def save(self) -> bool:
        """Save current configuration to JSON file."""
        data = {
            "store_language": self.STORE_LANGUAGE,
            "request_timeout": self.REQUEST_TIMEOUT,
            "include_imputed_times": self.INCLUDE_IMPUTED_TIMES,
            "resolution_depth": self.RESOLUTION_DEPTH,
            "tags_per_game": self.TAGS_PER_GAME,
            "tag_weight_factor": self.TAG_WEIGHT_FACTOR,
        }
        return save_json(self.SETTINGS_FILE, data)


# Global instance
config = Config()
