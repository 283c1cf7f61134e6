"""App Catalog - local Steam app metadata store."""

from appcatalog.version import __version__

__all__ = ["__version__"]
