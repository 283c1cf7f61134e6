# appcatalog/integrations/appinfo_feed.py

"""Local-cache (appinfo) feed adapter.

Turns parsed appinfo nodes into ``AppInfoRecord`` objects for
``AppDatabase.update_from_appinfo``. The binary appinfo.vdf reader lives
outside this package; it only has to hand over the nested dicts. Text
KeyValues dumps (e.g. ``steamcmd +app_info_print``) are read with ``vdf``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import vdf

from appcatalog.core.errors import FeedError
from appcatalog.core.models import AppPlatforms, AppType

logger = logging.getLogger("appcatalog.appinfo_feed")

__all__ = ["AppInfoRecord", "load_appinfo_text", "record_from_node", "records_from_nodes"]


@dataclass(frozen=True)
class AppInfoRecord:
    """What the local appinfo cache knows about one app.

    Attributes:
        app_id: Steam app id.
        name: App name, None if the cache has none.
        app_type: Parsed type; UNKNOWN when missing or unrecognised.
        platforms: Platforms from the ``oslist`` key.
        parent: Parent app id (DLC/demo → base game), 0 if none.
    """

    app_id: int
    name: str | None = None
    app_type: AppType = AppType.UNKNOWN
    platforms: AppPlatforms = AppPlatforms.NONE
    parent: int = 0


def _lower_keys(node: dict[str, Any]) -> dict[str, Any]:
    return {str(key).lower(): value for key, value in node.items()}


def record_from_node(node: dict[str, Any], app_id: int | None = None) -> AppInfoRecord | None:
    """Converts one parsed appinfo node into a record.

    Accepts both ``{"appinfo": {"common": {...}}}`` and a bare
    ``{"common": {...}}`` node. The id comes from ``common.gameid`` and falls
    back to ``app_id``.

    Args:
        node: Parsed node for a single app.
        app_id: Id to use when the node has no ``gameid``.

    Returns:
        The record, or None if the node has no common section or usable id.
    """
    if not isinstance(node, dict):
        return None

    root = _lower_keys(node)
    if isinstance(root.get("appinfo"), dict):
        root = _lower_keys(root["appinfo"])
    common = root.get("common")
    if not isinstance(common, dict):
        return None
    common = _lower_keys(common)

    try:
        record_id = int(common["gameid"]) if "gameid" in common else int(app_id)
    except (TypeError, ValueError):
        return None

    parent = 0
    if "parent" in common:
        try:
            parent = int(common["parent"])
        except (TypeError, ValueError):
            logger.debug("App %d has a non-numeric parent '%s'", record_id, common["parent"])

    name = common.get("name")
    return AppInfoRecord(
        app_id=record_id,
        name=str(name) if name else None,
        app_type=AppType.parse(common.get("type")),
        platforms=AppPlatforms.from_oslist(common.get("oslist")),
        parent=parent,
    )


def records_from_nodes(nodes: dict[Any, Any]) -> list[AppInfoRecord]:
    """Converts a mapping of app id → node, dropping unusable nodes."""
    records: list[AppInfoRecord] = []
    for key, node in nodes.items():
        try:
            fallback_id = int(key)
        except (TypeError, ValueError):
            fallback_id = None
        record = record_from_node(node, fallback_id)
        if record is not None:
            records.append(record)
    return records


def load_appinfo_text(path: Path) -> list[AppInfoRecord]:
    """Reads a text KeyValues appinfo dump.

    Args:
        path: File holding one or more ``"<appid>" { "common" { ... } }`` blocks.

    Returns:
        Records for every usable block.

    Raises:
        FeedError: If the file cannot be read or is not valid KeyValues.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            data = vdf.load(f)
    except (OSError, SyntaxError) as exc:
        logger.error("Failed to read appinfo dump %s: %s", path, exc)
        raise FeedError(f"Cannot read appinfo dump {path}: {exc}") from exc

    records = records_from_nodes(data)
    logger.info("Read %d appinfo records from %s", len(records), path.name)
    return records

