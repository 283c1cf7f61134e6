"""Exception types raised by the app catalog."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "AppCatalogError",
    "FeedError",
    "SnapshotError",
    "SnapshotReadError",
    "SnapshotWriteError",
]


class AppCatalogError(Exception):
    """Base class for all app catalog errors."""


class SnapshotError(AppCatalogError):
    """Raised when the database snapshot cannot be read or written.

    Attributes:
        path: The snapshot file involved.
    """

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class SnapshotReadError(SnapshotError):
    """The snapshot exists but could not be read or parsed."""


class SnapshotWriteError(SnapshotError):
    """The snapshot could not be written; the previous file is untouched."""


class FeedError(AppCatalogError):
    """A remote feed could not be fetched or its payload is unusable."""
