"""HowLongToBeat-Steam data models and payload parsing.

Contains the CompletionTimeRecord frozen dataclass and the validation that
turns the bulk JSON library dump into typed records. Kept apart from
hltb_feed.py to separate data/parsing from networking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("appcatalog.hltb_models")

__all__ = ["CompletionTimeRecord", "parse_hltb_payload"]


@dataclass(frozen=True)
class CompletionTimeRecord:
    """Completion times for one Steam app, in minutes.

    Attributes:
        app_id: Steam app id.
        main: Main story time.
        extras: Main story plus extras.
        completionist: 100% completion.
        main_imputed: True when ``main`` was estimated rather than measured.
        extras_imputed: True when ``extras`` was estimated.
        completionist_imputed: True when ``completionist`` was estimated.
    """

    app_id: int
    main: int = 0
    extras: int = 0
    completionist: int = 0
    main_imputed: bool = False
    extras_imputed: bool = False
    completionist_imputed: bool = False

    @classmethod
    def from_json(cls, game: dict[str, Any]) -> CompletionTimeRecord:
        """Validates one ``Games[]`` item of the library dump.

        Args:
            game: Item shaped ``{"SteamAppData": {"SteamAppId": ..., "HltbInfo": {...}}}``.

        Returns:
            The typed record.

        Raises:
            KeyError: If the app id or HLTB block is missing.
            TypeError: If a block is not an object.
            ValueError: If a time or id is not numeric.
        """
        app_data = game["SteamAppData"]
        info = app_data["HltbInfo"]
        if not isinstance(info, dict):
            raise TypeError("HltbInfo is not an object")
        return cls(
            app_id=int(app_data["SteamAppId"]),
            main=_minutes(info.get("MainTtb")),
            extras=_minutes(info.get("ExtrasTtb")),
            completionist=_minutes(info.get("CompletionistTtb")),
            main_imputed=_flag(info.get("MainTtbImputed")),
            extras_imputed=_flag(info.get("ExtrasTtbImputed")),
            completionist_imputed=_flag(info.get("CompletionistTtbImputed")),
        )


def _minutes(value: Any) -> int:
    if value in (None, ""):
        return 0
    minutes = int(float(value))
    if minutes < 0:
        raise ValueError(f"negative completion time {value!r}")
    return minutes


def _flag(value: Any) -> bool:
    # The dump encodes imputed flags as either JSON booleans or "True"/"False".
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def parse_hltb_payload(payload: dict[str, Any]) -> tuple[list[CompletionTimeRecord], int]:
    """Converts the library dump into records, skipping malformed items.

    Args:
        payload: Decoded JSON with a top-level ``Games`` list.

    Returns:
        Tuple of (records, number of skipped items).

    Raises:
        ValueError: If the payload has no ``Games`` list.
    """
    games = payload.get("Games") if isinstance(payload, dict) else None
    if not isinstance(games, list):
        raise ValueError("HLTB payload has no 'Games' list")

    records: list[CompletionTimeRecord] = []
    skipped = 0
    for game in games:
        try:
            records.append(CompletionTimeRecord.from_json(game))
        except (KeyError, TypeError, ValueError) as exc:
            skipped += 1
            logger.debug("Skipping malformed HLTB item: %s", exc)

    if skipped:
        logger.warning("Skipped %d malformed HLTB items", skipped)
    return records, skipped
