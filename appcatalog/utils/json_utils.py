"""JSON file helpers.

Two tiers:

* ``read_json`` / ``write_json_atomic`` raise on failure. The database
  snapshot uses them so that a bad file is reported, never silently replaced.
* ``load_json`` / ``save_json`` log and fall back. Used for settings, where a
  damaged file should not stop the program.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ["load_json", "read_json", "save_json", "write_json_atomic"]

logger = logging.getLogger("appcatalog.json_utils")


def read_json(path: Path) -> Any:
    """Parses a UTF-8 JSON file.

    Raises:
        OSError: If the file cannot be opened or read.
        json.JSONDecodeError: If the content is not valid JSON (a ValueError).
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: Path, data: Any, ensure_parents: bool = True, indent: int | None = 2) -> None:
    """Writes ``data`` to a temp file beside ``path`` and renames it over ``path``.

    Readers see either the old file or the complete new one. On any failure
    the temp file is removed and ``path`` is untouched.

    Args:
        path: Target file.
        data: JSON-serializable data.
        ensure_parents: Create missing parent directories first.
        indent: Passed to ``json.dump``; None for compact output.

    Raises:
        OSError: If writing or renaming fails.
        TypeError, ValueError: If ``data`` cannot be serialized.
    """
    if ensure_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def load_json(path: Path, default: Any = None) -> Any:
    """Like ``read_json``, but returns ``default`` (``{}`` if None) on failure.

    A missing file is normal and not logged; an unreadable or corrupt one is.
    """
    if default is None:
        default = {}
    try:
        return read_json(path)
    except FileNotFoundError:
        return default
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load JSON from %s: %s", path, exc)
        return default


def save_json(path: Path, data: Any, ensure_parents: bool = True) -> bool:
    """Like ``write_json_atomic``, but logs failures and returns False instead."""
    try:
        write_json_atomic(path, data, ensure_parents=ensure_parents)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Failed to save JSON to %s: %s", path, exc)
        return False
    return True
