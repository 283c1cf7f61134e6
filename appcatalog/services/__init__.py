"""Query and workflow services over the app database."""

from __future__ import annotations

__all__: list[str] = [
    "AggregateCache",
    "AggregateSlot",
    "HierarchicalResolver",
    "TagScoringEngine",
]

from appcatalog.services.aggregate_cache import AggregateCache, AggregateSlot
from appcatalog.services.resolver import HierarchicalResolver
from appcatalog.services.tag_scoring import TagScoringEngine
