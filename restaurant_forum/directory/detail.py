from __future__ import annotations

import logging
from typing import Any

from .annotation import viewer_flags
from .data_store import DataStore
from .errors import RestaurantNotFound
from .models import Dashboard, Restaurant, RestaurantDetail, RestaurantRecord, ViewerContext
from .pagination import parse_positive_int

logger = logging.getLogger(__name__)


def _load_restaurant(store: DataStore, restaurant_id: Any) -> RestaurantRecord:
    parsed = parse_positive_int(restaurant_id, None)
    record = store.fetch_restaurant_by_id(parsed) if parsed is not None else None
    if record is None:
        raise RestaurantNotFound(restaurant_id)
    return record


def _public(record: RestaurantRecord, **updates: Any) -> Restaurant:
    data = record.model_dump(exclude={"favorited_user_ids", "liked_user_ids"})
    data.update(updates)
    return Restaurant(**data)


def get_detail(store: DataStore, restaurant_id: Any, viewer: ViewerContext | None) -> RestaurantDetail:
    """
    Compose the single-restaurant page and count one view.

    Raises ``RestaurantNotFound`` before touching the view counter when the
    id is malformed or unknown.
    """
    record = _load_restaurant(store, restaurant_id)
    comments = store.fetch_comments(record.id)

    view_counts = store.increment_view_count(record.id)
    logger.debug("Restaurant %d viewed, count now %d", record.id, view_counts)
    is_favorited, is_liked = viewer_flags(record.id, viewer)

    return RestaurantDetail(
        restaurant=_public(record, view_counts=view_counts),
        is_favorited=is_favorited,
        is_liked=is_liked,
        comments=comments,
    )


def get_dashboard(store: DataStore, restaurant_id: Any) -> Dashboard:
    record = _load_restaurant(store, restaurant_id)
    return Dashboard(
        restaurant=_public(record),
        comment_count=store.count_comments(record.id),
        favorite_count=store.count_favorites(record.id),
    )
