from __future__ import annotations

import logging
from typing import Any

from .annotation import annotate
from .config import DEFAULT_DIRECTORY_CONFIG, DirectoryConfig
from .data_store import DataStore
from .models import RestaurantList, RestaurantListItem, ViewerContext
from .pagination import get_offset, paginate, parse_category_id, parse_positive_int

logger = logging.getLogger(__name__)


def truncate_description(text: str | None, length: int) -> str:
    return (text or "")[:length]


def list_restaurants(
    store: DataStore,
    viewer: ViewerContext | None,
    category_id: Any = None,
    limit: Any = None,
    page: Any = None,
    config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG,
) -> RestaurantList:
    """
    Assemble one page of the restaurant listing.

    Steps:
    - Resolve the category filter, page size and page number from raw query values.
    - Fetch the page of restaurants and the full category list.
      The two fetches are issued one after the other; neither needs the other's result.
    - Shorten descriptions for display and attach the viewer's flags.
    """
    category_id = parse_category_id(category_id)
    limit = parse_positive_int(limit, config.default_page_size)
    page = parse_positive_int(page, 1)
    offset = get_offset(limit, page)

    restaurants, total_count = store.fetch_restaurants(
        category_id=category_id, limit=limit, offset=offset,
    )
    categories = store.fetch_categories()

    rows = []
    for restaurant in restaurants:
        row = restaurant.model_dump()
        row["description"] = truncate_description(row["description"], config.description_length)
        rows.append(row)

    items = [RestaurantListItem(**row) for row in annotate(rows, viewer)]
    logger.debug(
        "Listing category=%s page=%d limit=%d returned %d of %d",
        category_id, page, limit, len(items), total_count,
    )

    return RestaurantList(
        restaurants=items,
        categories=categories,
        category_id=category_id,
        pagination=paginate(limit, page, total_count, default_limit=config.default_page_size),
    )
