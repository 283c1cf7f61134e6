# appcatalog/services/resolver.py

"""Hierarchical field resolution over parent links.

DLCs, demos and soundtracks often carry no store metadata of their own. When
an entry's field is empty the resolver walks up ``parent_id`` links until it
finds a value or runs out of depth. Parent links are not validated, so the
depth counter is the only thing that stops a cycle.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, TypeVar

from appcatalog.core.models import AppType, CompletionTimes, DatabaseEntry, VRSupport
from appcatalog.services.aggregate_cache import AggregateCache

logger = logging.getLogger("appcatalog.resolver")

__all__ = ["DEFAULT_DEPTH", "HierarchicalResolver"]

DEFAULT_DEPTH = 3

T = TypeVar("T")


class HierarchicalResolver:
    """Resolves entry fields with bounded parent fallback.

    Args:
        apps: The database's entry mapping, shared by reference.
        aggregates: Aggregate cache, used for the genre vocabulary.
    """

    def __init__(self, apps: dict[int, DatabaseEntry], aggregates: AggregateCache) -> None:
        self._apps = apps
        self._aggregates = aggregates

    def walk(self, app_id: int, depth: int = DEFAULT_DEPTH) -> Iterator[DatabaseEntry]:
        """Yields the entry and then its ancestors, at most ``depth`` hops up.

        Stops early at an unknown id or a missing parent (``parent_id <= 0``).
        """
        entry = self._apps.get(app_id)
        while entry is not None:
            yield entry
            if depth <= 0 or entry.parent_id <= 0:
                return
            depth -= 1
            entry = self._apps.get(entry.parent_id)

    def resolve(
        self,
        app_id: int,
        getter: Callable[[DatabaseEntry], T | None],
        depth: int = DEFAULT_DEPTH,
        is_empty: Callable[[T | None], bool] = lambda value: not value,
    ) -> T | None:
        """Returns the first non-empty value of ``getter`` along the parent chain.

        Args:
            app_id: Entry to start from.
            getter: Extracts the field from an entry.
            depth: Maximum number of parent hops.
            is_empty: Emptiness test for the field; defaults to falsiness.

        Returns:
            The first non-empty value, or None if there is none within depth.
        """
        for entry in self.walk(app_id, depth):
            value = getter(entry)
            if not is_empty(value):
                return value
        return None

    def _resolve_list(self, app_id: int, getter: Callable[[DatabaseEntry], list[str] | None], depth: int) -> list[str]:
        return list(self.resolve(app_id, getter, depth) or [])

    def get_developers(self, app_id: int, depth: int = DEFAULT_DEPTH) -> list[str]:
        return self._resolve_list(app_id, lambda e: e.developers, depth)

    def get_publishers(self, app_id: int, depth: int = DEFAULT_DEPTH) -> list[str]:
        return self._resolve_list(app_id, lambda e: e.publishers, depth)

    def get_flags(self, app_id: int, depth: int = DEFAULT_DEPTH) -> list[str]:
        return self._resolve_list(app_id, lambda e: e.flags, depth)

    def get_tags(self, app_id: int, depth: int = DEFAULT_DEPTH) -> list[str]:
        return self._resolve_list(app_id, lambda e: e.tags, depth)

    def get_completion_times(self, app_id: int, depth: int = DEFAULT_DEPTH) -> CompletionTimes:
        """HLTB times of the entry or its nearest ancestor that has any."""
        times = self.resolve(
            app_id,
            lambda e: e.completion_times,
            depth,
            is_empty=lambda value: value is None or value.is_empty(),
        )
        return times or CompletionTimes()

    def get_genres(self, app_id: int, depth: int = DEFAULT_DEPTH, tag_fallback: bool = True) -> list[str]:
        """Resolves genres, optionally deriving them from tags.

        At every level of the walk, own genres win. Without genres and with
        ``tag_fallback``, the entry's own tags that name a known genre
        (case-insensitive, against the store-wide genre set; repeats dropped,
        first spelling kept) are used before moving on to the parent.

        Args:
            app_id: Entry to start from.
            depth: Maximum number of parent hops.
            tag_fallback: Derive genres from tags when none are stored.

        Returns:
            Genre names, empty if nothing was found.
        """
        genre_keys: set[str] | None = None
        for entry in self.walk(app_id, depth):
            if entry.genres:
                return list(entry.genres)
            if tag_fallback and entry.tags:
                if genre_keys is None:
                    genre_keys = {genre.casefold() for genre in self._aggregates.all_genres()}
                from_tags: list[str] = []
                seen: set[str] = set()
                for tag in entry.tags:
                    key = tag.casefold()
                    if key in genre_keys and key not in seen:
                        seen.add(key)
                        from_tags.append(tag)
                if from_tags:
                    return from_tags
        return []

    def get_vr_support(self, app_id: int, depth: int = DEFAULT_DEPTH) -> VRSupport:
        """VR support of the entry, or of the nearest ancestor with any.

        Falls back whenever all three of headsets, input and play area are
        empty.
        """
        support = self.resolve(
            app_id,
            lambda e: e.vr_support,
            depth,
            is_empty=lambda value: value is None or value.is_empty(),
        )
        return support or VRSupport()

    def supports_vr(self, app_id: int, depth: int = DEFAULT_DEPTH) -> bool:
        return not self.get_vr_support(app_id, depth).is_empty()

    def include_in_filter(self, app_id: int, type_mask: AppType) -> bool:
        """Whether the entry's own type is part of ``type_mask``.

        No parent fallback. Unknown ids are treated as UNKNOWN.
        """
        entry = self._apps.get(app_id)
        app_type = entry.app_type if entry is not None else AppType.UNKNOWN
        return bool(app_type & type_mask)
