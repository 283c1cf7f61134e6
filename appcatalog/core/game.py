# appcatalog/core/game.py

"""Owned-game records for the user's active library.

The library (the "working set") is a mapping of app id to ``Game``. It is
supplied by the caller and used to restrict scoring queries and to choose
which apps are re-scraped after a store language change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

__all__ = ["Game", "GameLibrary", "library_from_ids"]


@dataclass
class Game:
    """A game in the user's library.

    Attributes:
        app_id: Steam app id; matches ``DatabaseEntry.app_id``.
        name: Display name from the library source.
        hidden: Hidden games are skipped by scoring queries.
        categories: User categories assigned to the game.
    """

    app_id: int
    name: str = ""
    hidden: bool = False
    categories: list[str] = field(default_factory=list)


GameLibrary = Mapping[int, Game]


def library_from_ids(app_ids: Iterable[int], hidden: Iterable[int] = ()) -> dict[int, Game]:
    """Builds a library mapping from plain app ids.

    Args:
        app_ids: Ids of owned games, in library order.
        hidden: Ids to mark hidden.

    Returns:
        Ordered dict of app id to Game.
    """
    hidden_ids = set(hidden)
    return {app_id: Game(app_id=app_id, hidden=app_id in hidden_ids) for app_id in app_ids}
