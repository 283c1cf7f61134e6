# appcatalog/services/language_service.py

"""Store language switching.

Tags, genres, flags, release dates and language/VR support are scraped from
the store in the active language. Switching languages wipes those fields on
every real app, marks the apps as stale, hands the library's ids to a
re-scraper and saves the snapshot.
"""

from __future__ import annotations

import locale
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from appcatalog.core.game import GameLibrary
from appcatalog.core.models import STALE_SCRAPE, LanguageSupport, StoreLanguage, VRSupport

if TYPE_CHECKING:
    from appcatalog.core.snapshot import SnapshotGateway

logger = logging.getLogger("appcatalog.language_service")

__all__ = ["LanguageChange", "LanguageService", "Rescraper", "resolve_system_language"]

Rescraper = Callable[[list[int]], None]

# Host locales whose two-letter code is not itself a store language
_LOCALE_ALIASES: dict[str, StoreLanguage] = {
    "zh_hans": StoreLanguage.ZH_HANS,
    "zh_cn": StoreLanguage.ZH_HANS,
    "zh_sg": StoreLanguage.ZH_HANS,
    "zh_hant": StoreLanguage.ZH_HANT,
    "zh_tw": StoreLanguage.ZH_HANT,
    "zh_hk": StoreLanguage.ZH_HANT,
    "zh_mo": StoreLanguage.ZH_HANT,
    "pt_br": StoreLanguage.PT_BR,
}


def _host_locale() -> str | None:
    name = locale.getlocale()[0]
    if not name:
        name = locale.setlocale(locale.LC_CTYPE, None)
    return name


def resolve_system_language(locale_name: str | None = None) -> StoreLanguage:
    """Maps a host locale name to a store language.

    Known regional and script aliases are checked first ("zh_TW", "pt-BR",
    "zh-Hans"), then the two-letter language code. Anything else resolves to
    English.

    Args:
        locale_name: Locale such as "de_DE.UTF-8"; the host locale if None.

    Returns:
        A concrete store language (never SYSTEM).
    """
    if locale_name is None:
        locale_name = _host_locale()
    if not locale_name:
        return StoreLanguage.EN

    normalized = locale_name.split(".", 1)[0].split("@", 1)[0].replace("-", "_").lower()
    parts = normalized.split("_")
    for length in (len(parts), 2):
        alias = _LOCALE_ALIASES.get("_".join(parts[:length]))
        if alias is not None:
            return alias

    code = parts[0]
    for language in StoreLanguage:
        if language is not StoreLanguage.SYSTEM and language.value == code:
            return language

    logger.debug("No store language for locale '%s', using English", locale_name)
    return StoreLanguage.EN


@dataclass
class LanguageChange:
    """Outcome of ``LanguageService.set_language``.

    Attributes:
        language: The resolved store language.
        changed: False when the language was already active (nothing touched).
        cleared: Number of entries whose store fields were wiped.
        queued: Library ids (present in the database) handed to the re-scraper, in library order.
    """

    language: StoreLanguage
    changed: bool
    cleared: int = 0
    queued: list[int] = field(default_factory=list)


class LanguageService:
    """Switches the database's store language.

    Args:
        gateway: Snapshot gateway of the database to switch.
        rescraper: Called with the ids to refresh; blocks until done.
    """

    def __init__(self, gateway: SnapshotGateway, rescraper: Rescraper | None = None) -> None:
        self._gateway = gateway
        self._database = gateway.database
        self._rescraper = rescraper

    def set_language(self, requested: StoreLanguage | str, games: GameLibrary | None = None) -> LanguageChange:
        """Makes ``requested`` the active store language.

        If it differs from the current one: every entry with id > 0 loses its
        language-dependent store data and is marked stale, all aggregates are
        invalidated, the library ids that have a database entry are passed to
        the re-scraper and the snapshot is saved. Library ids with no entry
        are not queued; the catalog and appinfo feeds create entries first.
        Sentinel entries (id <= 0) are not touched.

        Args:
            requested: Target language, or SYSTEM for the host locale.
            games: Active library; its ids that are in the database get re-scraped.

        Returns:
            What happened.

        Raises:
            ValueError: If ``requested`` is not a known language code.
            SnapshotWriteError: If the final save fails.
        """
        language = StoreLanguage(requested)
        if language is StoreLanguage.SYSTEM:
            language = resolve_system_language()

        if language == self._database.language:
            logger.debug("Store language already %s", language.value)
            return LanguageChange(language=language, changed=False)

        with self._database.lock:
            previous = self._database.language
            self._database.language = language
            cleared = 0
            for entry in self._database.apps.values():
                if entry.app_id <= 0:
                    continue
                entry.tags = None
                entry.flags = None
                entry.genres = None
                entry.steam_release_date = None
                entry.last_store_scrape = STALE_SCRAPE
                entry.vr_support = VRSupport()
                entry.language_support = LanguageSupport()
                cleared += 1
            self._database.aggregates.invalidate_all()

        logger.info("Store language %s -> %s, cleared %d entries", previous.value, language.value, cleared)

        queued: list[int] = []
        if games is not None:
            queued = [app_id for app_id in games if app_id > 0 and app_id in self._database]
        if queued and self._rescraper is not None:
            logger.info("Re-scraping %d library apps", len(queued))
            self._rescraper(queued)

        self._gateway.save()
        return LanguageChange(language=language, changed=True, cleared=cleared, queued=queued)
