"""
Top-N restaurant ranking.

Restaurants are ranked by how many users favorited them. Equal counts are
ordered by ascending restaurant id. When fewer than N restaurants have any
favorites, the list is topped up with the lowest-id restaurants that were
not already ranked, so the page always shows N entries when the store has
that many.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from .annotation import viewer_sets
from .config import DEFAULT_DIRECTORY_CONFIG, DirectoryConfig
from .data_store import DataStore
from .models import RankedRestaurant, ViewerContext
from .pagination import parse_positive_int

logger = logging.getLogger(__name__)


def rank_favorite_counts(counts: Iterable[tuple[int, int]], n: int) -> list[tuple[int, int]]:
    """Return the ``n`` highest ``(restaurant_id, count)`` pairs, count desc then id asc."""
    positive = [(rid, count) for rid, count in counts if count > 0]
    positive.sort(key=lambda pair: (-pair[1], pair[0]))
    return positive[:n]


def top_restaurants(
    store: DataStore,
    viewer: ViewerContext | None,
    n: Any = None,
    config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG,
) -> list[RankedRestaurant]:
    n = parse_positive_int(n, config.top_n)

    all_counts = store.aggregate_favorite_counts()
    count_by_id = dict(all_counts)
    ranked = rank_favorite_counts(all_counts, n)
    ranked_ids = [rid for rid, _ in ranked]

    # One batched fetch; the store returns rows in its own order
    by_id = {r.id: r for r in store.fetch_restaurants_by_ids(ranked_ids)}
    selected = [by_id[rid] for rid in ranked_ids if rid in by_id]

    missing = n - len(selected)
    if missing > 0:
        backfill = store.fetch_restaurants_excluding_ids([r.id for r in selected], missing)
        selected.extend(backfill)
        logger.debug("Backfilled top list with %d restaurants", len(backfill))

    favorited, _ = viewer_sets(viewer)
    return [
        RankedRestaurant(
            **restaurant.model_dump(),
            favorited_count=count_by_id.get(restaurant.id, 0),
            is_favorited=restaurant.id in favorited,
        )
        for restaurant in selected
    ]
