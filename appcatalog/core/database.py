# appcatalog/core/database.py

"""App Catalog - in-memory app database.

``AppDatabase`` is the store context: it owns the app id → entry mapping, the
active store language and the lock, and wires up the query services that
share the mapping by reference.

Architecture:
    Feeds (app list, appinfo, HLTB) -> AppDatabase merges
                    |
        Resolver / Aggregates / Scoring (read-mostly)
                    |
        SnapshotGateway (db.json at rest)

Concurrency contract: single writer, multiple readers. ``lock`` serializes
snapshot load/save and the mutation phase of a language change; merges and
queries are not synchronized and must be driven by one owner at a time.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Iterable

from appcatalog.core.models import NEVER_SCRAPED, AppPlatforms, AppType, DatabaseEntry, StoreLanguage
from appcatalog.services.aggregate_cache import AggregateCache
from appcatalog.services.resolver import HierarchicalResolver
from appcatalog.services.tag_scoring import TagScoringEngine
from appcatalog.utils.date_utils import parse_release_year

if TYPE_CHECKING:
    from appcatalog.integrations.appinfo_feed import AppInfoRecord
    from appcatalog.integrations.hltb_models import CompletionTimeRecord

logger = logging.getLogger("appcatalog.database")

__all__ = ["AppDatabase"]


class AppDatabase:
    """Store of per-app metadata merged from independent feeds.

    Entries are created the first time any feed reports an id and are never
    deleted. Merges only ever fill in or refine fields; empty feed data never
    overwrites stored data.

    Args:
        language: Store language the metadata is currently in.
    """

    def __init__(self, language: StoreLanguage = StoreLanguage.EN) -> None:
        self.apps: dict[int, DatabaseEntry] = {}
        self.language: StoreLanguage = language
        self.last_hltb_update: int = 0
        self.lock = threading.RLock()

        # Delegated services (share self.apps by reference)
        self.aggregates = AggregateCache(self.apps)
        self.resolver = HierarchicalResolver(self.apps, self.aggregates)
        self.scoring = TagScoringEngine(self.apps, self.aggregates)

    def __len__(self) -> int:
        return len(self.apps)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self.apps

    def contains(self, app_id: int) -> bool:
        return app_id in self.apps

    def get_entry(self, app_id: int) -> DatabaseEntry | None:
        return self.apps.get(app_id)

    def get_name(self, app_id: int) -> str | None:
        entry = self.apps.get(app_id)
        return entry.name if entry is not None else None

    def get_release_year(self, app_id: int) -> int:
        """Year of the stored store release date, 0 if unknown or unparseable."""
        entry = self.apps.get(app_id)
        if entry is None:
            return 0
        return parse_release_year(entry.steam_release_date)

    def add_entry(self, entry: DatabaseEntry) -> DatabaseEntry:
        """Adds an entry unless its id is already present.

        Returns:
            The stored entry for that id (the existing one if there was one).
        """
        return self.apps.setdefault(entry.app_id, entry)

    def replace_contents(
        self, apps: dict[int, DatabaseEntry], language: StoreLanguage, last_hltb_update: int
    ) -> None:
        """Swaps in a complete state (used by snapshot loading).

        The mapping object itself is kept so the services keep seeing it; all
        aggregate slots are reset.
        """
        with self.lock:
            self.apps.clear()
            self.apps.update(apps)
            self.language = language
            self.last_hltb_update = last_hltb_update
            self.aggregates.invalidate_all()

    # ------------------------------------------------------------------
    # Feed merges
    # ------------------------------------------------------------------

    def upsert_from_catalog(self, app_id: int, name: str | None) -> bool:
        """Creates or renames an entry from the catalog listing.

        A rename (or naming a previously unnamed entry) resets the type to
        UNKNOWN, since the old classification may belong to another product.

        Returns:
            True if a new entry was created.
        """
        entry = self.apps.get(app_id)
        if entry is None:
            self.apps[app_id] = DatabaseEntry(app_id=app_id, name=name)
            return True
        if not entry.name or entry.name != name:
            entry.name = name
            entry.app_type = AppType.UNKNOWN
        return False

    def integrate_app_list(self, pairs: Iterable[tuple[int, str]]) -> int:
        """Merges a catalog listing.

        Args:
            pairs: (app id, name) pairs.

        Returns:
            Number of entries created.
        """
        added = 0
        skipped = 0
        for pair in pairs:
            try:
                app_id, name = pair
                created = self.upsert_from_catalog(int(app_id), name)
            except (TypeError, ValueError) as exc:
                skipped += 1
                logger.debug("Skipping malformed app list pair %r: %s", pair, exc)
                continue
            if created:
                added += 1

        if skipped:
            logger.warning("Skipped %d malformed app list pairs", skipped)
        logger.info("App list integrated: %d new entries", added)
        return added

    def update_from_appinfo(self, records: Iterable[AppInfoRecord], timestamp: int | None = None) -> int:
        """Merges records from the local appinfo cache.

        Precedence per record:
            - type: only if the record's type is known
            - name: only if the record has one
            - platforms: only if none are stored, or the entry was never
              store-scraped and the record lists some. Store data wins.
            - parent: only if the record names one

        Args:
            records: Parsed appinfo records.
            timestamp: Unix time stamped on every touched entry; defaults to now.

        Returns:
            Number of records processed. Malformed records are skipped
            without touching the store.
        """
        if timestamp is None:
            timestamp = int(time.time())

        updated = 0
        for record in records:
            try:
                app_id, app_type, name, platforms, parent = _checked_appinfo(record)
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed appinfo record %r: %s", record, exc)
                continue

            entry = self.apps.get(app_id)
            if entry is None:
                entry = DatabaseEntry(app_id=app_id)
                self.apps[app_id] = entry

            entry.last_app_info_update = timestamp
            if app_type != AppType.UNKNOWN:
                entry.app_type = app_type
            if name:
                entry.name = name
            if entry.platforms == AppPlatforms.NONE or (
                entry.last_store_scrape == NEVER_SCRAPED and platforms != AppPlatforms.NONE
            ):
                entry.platforms = platforms
            if parent > 0:
                entry.parent_id = parent
            updated += 1

        logger.info("Appinfo integrated: %d records", updated)
        return updated

    def update_from_hltb(self, records: Iterable[CompletionTimeRecord], include_imputed: bool) -> int:
        """Merges HowLongToBeat completion times into known entries.

        Records for unknown ids are ignored. When ``include_imputed`` is False,
        each time the feed marks as imputed is stored as 0.

        Returns:
            Number of entries updated.
        """
        updated = 0
        for record in records:
            try:
                entry = self.apps.get(int(record.app_id))
                if entry is None:
                    continue
                main = 0 if record.main_imputed and not include_imputed else int(record.main)
                extras = 0 if record.extras_imputed and not include_imputed else int(record.extras)
                completionist = (
                    0 if record.completionist_imputed and not include_imputed else int(record.completionist)
                )
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed HLTB record %r: %s", record, exc)
                continue

            entry.hltb_main = main
            entry.hltb_extras = extras
            entry.hltb_completionist = completionist
            updated += 1

        self.last_hltb_update = int(time.time())
        logger.info("HLTB integrated: %d entries", updated)
        return updated


def _checked_appinfo(record: AppInfoRecord) -> tuple[int, AppType, str | None, AppPlatforms, int]:
    """Validates an appinfo record before any of it is merged.

    Raises:
        AttributeError: If a field is missing.
        TypeError: If a field has the wrong type.
        ValueError: If the id or parent is not numeric.
    """
    if not isinstance(record.app_type, AppType):
        raise TypeError(f"app_type must be an AppType, got {record.app_type!r}")
    if record.name is not None and not isinstance(record.name, str):
        raise TypeError(f"name must be a string, got {record.name!r}")
    return (
        int(record.app_id),
        record.app_type,
        record.name,
        AppPlatforms(int(record.platforms)),
        int(record.parent),
    )
