from __future__ import annotations

from .config import DEFAULT_DIRECTORY_CONFIG, DirectoryConfig
from .data_store import DataStore
from .models import Feeds


def get_feeds(store: DataStore, config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG) -> Feeds:
    """Newest restaurants and newest comments, ``config.feed_size`` of each."""
    return Feeds(
        restaurants=store.fetch_latest_restaurants(config.feed_size),
        comments=store.fetch_comments(limit=config.feed_size, with_restaurant=True),
    )
