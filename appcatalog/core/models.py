# appcatalog/core/models.py

"""Data model for the app catalog database.

Defines the per-app ``DatabaseEntry`` record, the flag enums for app types and
platforms, the language/VR support triples and the store languages. Entries
convert to and from plain dicts for the JSON snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, Flag, IntFlag
from typing import Any

__all__ = [
    "AppPlatforms",
    "AppType",
    "CompletionTimes",
    "DatabaseEntry",
    "LanguageSupport",
    "NEVER_SCRAPED",
    "STALE_SCRAPE",
    "StoreLanguage",
    "VRSupport",
]

logger = logging.getLogger("appcatalog.models")

# last_store_scrape sentinels
NEVER_SCRAPED = 0
STALE_SCRAPE = 1


class AppType(Flag):
    """Steam app classification, as reported by appinfo."""

    APPLICATION = 1
    DEMO = 2
    DLC = 4
    GAME = 8
    MEDIA = 16
    TOOL = 32
    CONFIG = 64
    SERIES = 128
    VIDEO = 256
    MUSIC = 512
    HARDWARE = 1024
    OTHER = 2048
    UNKNOWN = 4096

    INCLUSION_NORMAL = APPLICATION | GAME
    INCLUSION_ALL = 8191

    @classmethod
    def parse(cls, value: str | None) -> AppType:
        """Parses an appinfo type string case-insensitively.

        Unrecognised strings are logged so the vocabulary can be extended,
        and map to UNKNOWN.

        Args:
            value: Raw type string (e.g. "Game", "DLC").

        Returns:
            The matching AppType, or UNKNOWN.
        """
        if not value:
            return cls.UNKNOWN
        member = cls.__members__.get(value.strip().upper())
        if member is None or member.name.startswith("INCLUSION_"):
            logger.debug("New app type '%s'", value)
            return cls.UNKNOWN
        return member

    def label(self) -> str:
        """Lowercase member names joined by "|", e.g. "demo|game"."""
        names = [
            member.name.lower()
            for member in type(self)
            if (member.value & (member.value - 1)) == 0 and member & self
        ]
        return "|".join(names)


class AppPlatforms(IntFlag):
    """Supported operating systems."""

    NONE = 0
    WINDOWS = 1
    MAC = 2
    LINUX = 4

    @classmethod
    def from_oslist(cls, oslist: str | None) -> AppPlatforms:
        """Builds a platform set from an appinfo ``oslist`` ("windows,macos,linux")."""
        platforms = cls.NONE
        if not oslist:
            return platforms
        lowered = oslist.lower()
        if "windows" in lowered:
            platforms |= cls.WINDOWS
        if "mac" in lowered:
            platforms |= cls.MAC
        if "linux" in lowered:
            platforms |= cls.LINUX
        return platforms


class StoreLanguage(str, Enum):
    """Languages the Steam store can serve metadata in.

    ``SYSTEM`` is symbolic and resolves to a concrete language from the host
    locale.
    """

    SYSTEM = "system"
    EN = "en"
    BG = "bg"
    CS = "cs"
    DA = "da"
    NL = "nl"
    FI = "fi"
    FR = "fr"
    DE = "de"
    EL = "el"
    HU = "hu"
    IT = "it"
    JA = "ja"
    KO = "ko"
    NO = "no"
    PL = "pl"
    PT = "pt"
    PT_BR = "pt_BR"
    RO = "ro"
    RU = "ru"
    ZH_HANS = "zh_Hans"
    ZH_HANT = "zh_Hant"
    ES = "es"
    SV = "sv"
    TH = "th"
    TR = "tr"
    UK = "uk"

    @property
    def steam_name(self) -> str:
        """The language name the Steam store API expects (``l=`` parameter)."""
        return _STEAM_LANGUAGE_NAMES.get(self, "english")


_STEAM_LANGUAGE_NAMES: dict[StoreLanguage, str] = {
    StoreLanguage.EN: "english",
    StoreLanguage.BG: "bulgarian",
    StoreLanguage.CS: "czech",
    StoreLanguage.DA: "danish",
    StoreLanguage.NL: "dutch",
    StoreLanguage.FI: "finnish",
    StoreLanguage.FR: "french",
    StoreLanguage.DE: "german",
    StoreLanguage.EL: "greek",
    StoreLanguage.HU: "hungarian",
    StoreLanguage.IT: "italian",
    StoreLanguage.JA: "japanese",
    StoreLanguage.KO: "koreana",
    StoreLanguage.NO: "norwegian",
    StoreLanguage.PL: "polish",
    StoreLanguage.PT: "portuguese",
    StoreLanguage.PT_BR: "brazilian",
    StoreLanguage.RO: "romanian",
    StoreLanguage.RU: "russian",
    StoreLanguage.ZH_HANS: "schinese",
    StoreLanguage.ZH_HANT: "tchinese",
    StoreLanguage.ES: "spanish",
    StoreLanguage.SV: "swedish",
    StoreLanguage.TH: "thai",
    StoreLanguage.TR: "turkish",
    StoreLanguage.UK: "ukrainian",
}


def _str_list(value: Any) -> list[str] | None:
    """Validates an optional list of strings from snapshot data."""
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TypeError(f"expected a list of strings, got {value!r}")
    return list(value)


def _app_type(value: Any) -> AppType:
    """Restores a stored type: an int flag value, or a name from version 1 snapshots."""
    if value is None:
        return AppType.UNKNOWN
    if isinstance(value, str):
        return AppType.parse(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"app_type must be an int, got {value!r}")
    return AppType(value)


@dataclass
class LanguageSupport:
    """Languages an app supports, split by kind of support."""

    interface: list[str] | None = None
    subtitles: list[str] | None = None
    full_audio: list[str] | None = None

    def is_empty(self) -> bool:
        return not (self.interface or self.subtitles or self.full_audio)

    def to_dict(self) -> dict[str, Any]:
        return {"interface": self.interface, "subtitles": self.subtitles, "full_audio": self.full_audio}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LanguageSupport:
        data = data or {}
        return cls(
            interface=_str_list(data.get("interface")),
            subtitles=_str_list(data.get("subtitles")),
            full_audio=_str_list(data.get("full_audio")),
        )


@dataclass
class VRSupport:
    """VR headsets, input devices and play areas an app supports."""

    headsets: list[str] | None = None
    input: list[str] | None = None
    play_area: list[str] | None = None

    def is_empty(self) -> bool:
        return not (self.headsets or self.input or self.play_area)

    def to_dict(self) -> dict[str, Any]:
        return {"headsets": self.headsets, "input": self.input, "play_area": self.play_area}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> VRSupport:
        data = data or {}
        return cls(
            headsets=_str_list(data.get("headsets")),
            input=_str_list(data.get("input")),
            play_area=_str_list(data.get("play_area")),
        )


@dataclass(frozen=True)
class CompletionTimes:
    """HowLongToBeat completion times in minutes (0 = unknown).

    Attributes:
        main: Time to finish the main story.
        extras: Main story plus extras.
        completionist: 100% completion.
    """

    main: int = 0
    extras: int = 0
    completionist: int = 0

    def is_empty(self) -> bool:
        return not (self.main or self.extras or self.completionist)


@dataclass
class DatabaseEntry:
    """Metadata for a single Steam app, merged from several feeds.

    ``None`` and an empty list are equivalent for the list fields; both mean
    "no data" and trigger parent fallback during resolution.
    """

    app_id: int
    name: str | None = None
    app_type: AppType = AppType.UNKNOWN
    parent_id: int = 0
    platforms: AppPlatforms = AppPlatforms.NONE

    developers: list[str] | None = None
    publishers: list[str] | None = None
    genres: list[str] | None = None
    flags: list[str] | None = None
    tags: list[str] | None = None

    language_support: LanguageSupport = field(default_factory=LanguageSupport)
    vr_support: VRSupport = field(default_factory=VRSupport)

    steam_release_date: str | None = None

    # HLTB data (minutes)
    hltb_main: int = 0
    hltb_extras: int = 0
    hltb_completionist: int = 0

    # Unix timestamps
    last_store_scrape: int = NEVER_SCRAPED
    last_app_info_update: int = 0

    @property
    def completion_times(self) -> CompletionTimes:
        return CompletionTimes(self.hltb_main, self.hltb_extras, self.hltb_completionist)

    def to_dict(self) -> dict[str, Any]:
        """Serializes the entry for the JSON snapshot.

        Raises:
            TypeError: If ``app_type`` is not an AppType.
        """
        if not isinstance(self.app_type, AppType):
            raise TypeError(f"app {self.app_id} has app_type {self.app_type!r}")
        return {
            "app_id": self.app_id,
            "name": self.name,
            "app_type": self.app_type.value,
            "parent_id": self.parent_id,
            "platforms": int(self.platforms),
            "developers": self.developers,
            "publishers": self.publishers,
            "genres": self.genres,
            "flags": self.flags,
            "tags": self.tags,
            "language_support": self.language_support.to_dict(),
            "vr_support": self.vr_support.to_dict(),
            "steam_release_date": self.steam_release_date,
            "hltb_main": self.hltb_main,
            "hltb_extras": self.hltb_extras,
            "hltb_completionist": self.hltb_completionist,
            "last_store_scrape": self.last_store_scrape,
            "last_app_info_update": self.last_app_info_update,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatabaseEntry:
        """Builds an entry from snapshot data.

        Args:
            data: A dict produced by ``to_dict``.

        Returns:
            The reconstructed entry.

        Raises:
            KeyError: If ``app_id`` is missing.
            TypeError: If a field has the wrong type.
            ValueError: If a numeric field cannot be converted.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")

        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise TypeError(f"name must be a string, got {name!r}")
        release = data.get("steam_release_date")
        if release is not None and not isinstance(release, str):
            raise TypeError(f"steam_release_date must be a string, got {release!r}")

        return cls(
            app_id=int(data["app_id"]),
            name=name,
            app_type=_app_type(data.get("app_type")),
            parent_id=int(data.get("parent_id", 0)),
            platforms=AppPlatforms(int(data.get("platforms", 0))),
            developers=_str_list(data.get("developers")),
            publishers=_str_list(data.get("publishers")),
            genres=_str_list(data.get("genres")),
            flags=_str_list(data.get("flags")),
            tags=_str_list(data.get("tags")),
            language_support=LanguageSupport.from_dict(data.get("language_support")),
            vr_support=VRSupport.from_dict(data.get("vr_support")),
            steam_release_date=release,
            hltb_main=int(data.get("hltb_main", 0)),
            hltb_extras=int(data.get("hltb_extras", 0)),
            hltb_completionist=int(data.get("hltb_completionist", 0)),
            last_store_scrape=int(data.get("last_store_scrape", NEVER_SCRAPED)),
            last_app_info_update=int(data.get("last_app_info_update", 0)),
        )
