# appcatalog/services/tag_scoring.py

"""Popularity scoring for tags, developers and publishers.

Used by auto-categorization to pick which tags are worth turning into
categories. Tags are weighted by their position on each game: the store lists
the most-voted tags first.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from appcatalog.core.game import GameLibrary
from appcatalog.core.models import DatabaseEntry
from appcatalog.services.aggregate_cache import AggregateCache

logger = logging.getLogger("appcatalog.tag_scoring")

__all__ = ["TagScoringEngine", "position_scores"]


def position_scores(count: int, weight_factor: float) -> list[float]:
    """Scores for ``count`` tags in store order.

    The first tag scores ``weight_factor``, the last scores 1, and the ones
    in between are linearly interpolated. A factor of 1 or less disables
    weighting (every tag scores 1); a single tag scores ``weight_factor``.

    Args:
        count: Number of tags taken from the game.
        weight_factor: Score of the first tag.

    Returns:
        One score per position.
    """
    if weight_factor <= 1:
        return [1.0] * count
    if count <= 1:
        return [float(weight_factor)] * count
    scores = []
    for i in range(count):
        frac = i / (count - 1)
        scores.append((1 - frac) * weight_factor + frac)
    return scores


class TagScoringEngine:
    """Counts and scores names across the database or a library subset.

    When a library is given, only its non-hidden games that exist in the
    database take part; otherwise every entry does. Fields are read directly
    from each entry, without parent fallback.

    Args:
        apps: The database's entry mapping, shared by reference.
        aggregates: Aggregate cache, used to exclude genre names.
    """

    def __init__(self, apps: dict[int, DatabaseEntry], aggregates: AggregateCache) -> None:
        self._apps = apps
        self._aggregates = aggregates

    def _entries(self, games: GameLibrary | None) -> Iterator[DatabaseEntry]:
        if games is None:
            yield from self._apps.values()
            return
        for app_id, game in games.items():
            entry = self._apps.get(app_id)
            if entry is not None and not game.hidden:
                yield entry

    def _counts(
        self,
        getter: Callable[[DatabaseEntry], list[str] | None],
        games: GameLibrary | None,
        min_count: int,
    ) -> list[tuple[str, int]]:
        counts: dict[str, int] = {}
        for entry in self._entries(games):
            for name in getter(entry) or ():
                counts[name] = counts.get(name, 0) + 1
        return [(name, count) for name, count in counts.items() if count >= min_count]

    def developer_counts(self, games: GameLibrary | None = None, min_count: int = 0) -> list[tuple[str, int]]:
        """Number of games per developer, keeping those with at least ``min_count``.

        Returns:
            Unordered list of (developer, game count) pairs.
        """
        return self._counts(lambda e: e.developers, games, min_count)

    def publisher_counts(self, games: GameLibrary | None = None, min_count: int = 0) -> list[tuple[str, int]]:
        """Number of games per publisher, keeping those with at least ``min_count``.

        Returns:
            Unordered list of (publisher, game count) pairs.
        """
        return self._counts(lambda e: e.publishers, games, min_count)

    def tag_scores(
        self,
        games: GameLibrary | None = None,
        weight_factor: float = 1.0,
        min_score: float = 0,
        tags_per_game: int = 0,
        exclude_genres: bool = False,
        sort_by_score: bool = True,
    ) -> list[tuple[str, float]]:
        """Scores tags by position-weighted popularity.

        Scores from all qualifying games are summed per tag, ignoring case;
        the first spelling seen is the one reported.

        Args:
            games: Library to restrict to, or None for the whole database.
            weight_factor: Score of each game's first tag (see ``position_scores``).
            min_score: Tags whose total is below this are dropped.
            tags_per_game: Only the first N tags of each game count; 0 = all.
            exclude_genres: Drop tags that are also store genres.
            sort_by_score: Sort by score descending; otherwise by name.

        Returns:
            List of (tag, total score) pairs.
        """
        totals: dict[str, list] = {}
        for entry in self._entries(games):
            if not entry.tags:
                continue
            tags = entry.tags if tags_per_game <= 0 else entry.tags[:tags_per_game]
            for tag, score in zip(tags, position_scores(len(tags), weight_factor)):
                slot = totals.setdefault(tag.casefold(), [tag, 0.0])
                slot[1] += score

        if exclude_genres:
            for genre in self._aggregates.all_genres():
                totals.pop(genre.casefold(), None)

        scored = [(name, total) for name, total in totals.values() if total >= min_score]
        if sort_by_score:
            scored.sort(key=lambda item: (-item[1], item[0].casefold()))
        else:
            scored.sort(key=lambda item: item[0].casefold())

        logger.debug("Scored %d tags (%d kept)", len(totals), len(scored))
        return scored
