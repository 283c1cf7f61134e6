# appcatalog/services/aggregate_cache.py

"""Store-wide aggregate sets (all genres, all developers, ...).

Each slot is computed lazily by unioning one field across every database
entry and then kept until it is explicitly invalidated or recomputed.
Mutating the database never invalidates a slot on its own: bulk writers
(the language change, a snapshot load) clear the slots they affect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from appcatalog.core.models import DatabaseEntry, LanguageSupport, VRSupport

logger = logging.getLogger("appcatalog.aggregate_cache")

__all__ = ["AggregateCache", "AggregateSlot", "SlotState", "case_insensitive_union"]


class AggregateSlot(Enum):
    """Derived store-wide sets held by the cache."""

    DEVELOPERS = "developers"
    PUBLISHERS = "publishers"
    GENRES = "genres"
    FLAGS = "flags"
    LANGUAGES = "languages"
    VR_SUPPORT = "vr_support"


class SlotState(Enum):
    STALE = "stale"
    COMPUTED = "computed"


@dataclass
class _Slot:
    state: SlotState = SlotState.STALE
    value: Any = None


def case_insensitive_union(lists: Iterable[list[str] | None]) -> tuple[str, ...]:
    """Unions string lists, ignoring case.

    The first spelling seen for a name is kept. The result is sorted
    case-insensitively.

    Args:
        lists: Lists to merge; None entries are skipped.

    Returns:
        Sorted, de-duplicated tuple of names.
    """
    seen: dict[str, str] = {}
    for values in lists:
        if not values:
            continue
        for value in values:
            seen.setdefault(value.casefold(), value)
    return tuple(seen[key] for key in sorted(seen))


class AggregateCache:
    """Lazily computed aggregates over a shared ``apps`` mapping.

    Every slot is either STALE or COMPUTED. ``get_or_compute`` and
    ``force_recompute`` move a slot to COMPUTED; ``invalidate`` moves it back
    to STALE. The four name slots hold tuples; the language and VR slots
    hold a LanguageSupport / VRSupport built fresh on each recompute.

    Args:
        apps: The database's entry mapping, shared by reference.
    """

    def __init__(self, apps: dict[int, DatabaseEntry]) -> None:
        self._apps = apps
        self._slots: dict[AggregateSlot, _Slot] = {slot: _Slot() for slot in AggregateSlot}
        self._builders: dict[AggregateSlot, Callable[[], Any]] = {
            AggregateSlot.DEVELOPERS: lambda: self._union(lambda e: e.developers),
            AggregateSlot.PUBLISHERS: lambda: self._union(lambda e: e.publishers),
            AggregateSlot.GENRES: lambda: self._union(lambda e: e.genres),
            AggregateSlot.FLAGS: lambda: self._union(lambda e: e.flags),
            AggregateSlot.LANGUAGES: self._build_languages,
            AggregateSlot.VR_SUPPORT: self._build_vr_support,
        }

    def state(self, slot: AggregateSlot) -> SlotState:
        return self._slots[slot].state

    def get_or_compute(self, slot: AggregateSlot) -> Any:
        """Returns the cached value, computing it first if the slot is stale."""
        cached = self._slots[slot]
        if cached.state is SlotState.COMPUTED:
            return cached.value
        return self.force_recompute(slot)

    def force_recompute(self, slot: AggregateSlot) -> Any:
        """Rebuilds the slot from the current entries and caches the result."""
        value = self._builders[slot]()
        self._slots[slot] = _Slot(SlotState.COMPUTED, value)
        logger.debug("Recomputed aggregate %s over %d entries", slot.value, len(self._apps))
        return value

    def invalidate(self, slot: AggregateSlot) -> None:
        self._slots[slot] = _Slot()

    def invalidate_all(self) -> None:
        for slot in AggregateSlot:
            self.invalidate(slot)

    # Convenience getters

    def all_developers(self) -> tuple[str, ...]:
        return self.get_or_compute(AggregateSlot.DEVELOPERS)

    def all_publishers(self) -> tuple[str, ...]:
        return self.get_or_compute(AggregateSlot.PUBLISHERS)

    def all_genres(self) -> tuple[str, ...]:
        return self.get_or_compute(AggregateSlot.GENRES)

    def all_flags(self) -> tuple[str, ...]:
        return self.get_or_compute(AggregateSlot.FLAGS)

    def all_languages(self) -> LanguageSupport:
        return self.get_or_compute(AggregateSlot.LANGUAGES)

    def all_vr_support(self) -> VRSupport:
        return self.get_or_compute(AggregateSlot.VR_SUPPORT)

    # Builders

    def _union(self, getter: Callable[[DatabaseEntry], list[str] | None]) -> tuple[str, ...]:
        return case_insensitive_union(getter(entry) for entry in self._apps.values())

    def _build_languages(self) -> LanguageSupport:
        entries = list(self._apps.values())
        return LanguageSupport(
            interface=list(case_insensitive_union(e.language_support.interface for e in entries)),
            subtitles=list(case_insensitive_union(e.language_support.subtitles for e in entries)),
            full_audio=list(case_insensitive_union(e.language_support.full_audio for e in entries)),
        )

    def _build_vr_support(self) -> VRSupport:
        entries = list(self._apps.values())
        return VRSupport(
            headsets=list(case_insensitive_union(e.vr_support.headsets for e in entries)),
            input=list(case_insensitive_union(e.vr_support.input for e in entries)),
            play_area=list(case_insensitive_union(e.vr_support.play_area for e in entries)),
        )
