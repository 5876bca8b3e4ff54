from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_PACKAGED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class DirectoryConfig:
    """
    Sizes used when assembling directory views.
    """

    default_page_size: int = 9
    top_n: int = 10
    description_length: int = 50
    feed_size: int = 10


@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path = Path(os.getenv("RESTAURANT_FORUM_DATA_DIR", str(_PACKAGED_DATA_DIR)))
    restaurants_filename: str = "restaurants.csv"
    categories_filename: str = "categories.csv"
    users_filename: str = "users.csv"
    comments_filename: str = "comments.csv"
    favorites_filename: str = "favorites.csv"
    likes_filename: str = "likes.csv"


DEFAULT_DIRECTORY_CONFIG = DirectoryConfig()
DEFAULT_STORE_CONFIG = StoreConfig()
