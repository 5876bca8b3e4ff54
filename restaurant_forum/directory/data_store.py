"""
In-memory restaurant store backed by pandas DataFrames.

Seed data is read from CSV files once per process. Every row leaves the
store as a pydantic model with snake_case fields, so callers never touch
DataFrame rows or column names directly.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator

import pandas as pd

from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .errors import DataAccessError
from .models import Category, Comment, Restaurant, RestaurantRecord, User

logger = logging.getLogger(__name__)

RESTAURANT_COLUMNS = [
    "id",
    "name",
    "tel",
    "address",
    "opening_hours",
    "description",
    "image",
    "view_counts",
    "category_id",
    "created_at",
]
CATEGORY_COLUMNS = ["id", "name"]
USER_COLUMNS = ["id", "name", "email"]
COMMENT_COLUMNS = ["id", "text", "user_id", "restaurant_id", "created_at"]
EDGE_COLUMNS = ["user_id", "restaurant_id"]

INT64_MAX = 2**63 - 1


def _optional(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _fits_int64(value: int) -> bool:
    return -INT64_MAX - 1 <= value <= INT64_MAX


def _optional_int(value: Any) -> int | None:
    value = _optional(value)
    return None if value is None else int(value)


def _optional_str(value: Any) -> str | None:
    value = _optional(value)
    return None if value is None else str(value)


def _timestamp(value: Any):
    value = _optional(value)
    return None if value is None else value.to_pydatetime()


def _with_columns(df: pd.DataFrame | None, columns: list[str]) -> pd.DataFrame:
    df = pd.DataFrame(columns=columns) if df is None else df.copy()
    for col in columns:
        if col not in df.columns:
            df[col] = pd.NA
    return df[columns].copy()


def _prepare_restaurants(df: pd.DataFrame) -> pd.DataFrame:
    df = _with_columns(df, RESTAURANT_COLUMNS)
    df["id"] = df["id"].astype("int64")
    df["description"] = df["description"].fillna("").astype(str)
    df["view_counts"] = pd.to_numeric(df["view_counts"], errors="coerce").fillna(0).astype("int64")
    # Float keeps NaN for restaurants whose category was deleted
    df["category_id"] = pd.to_numeric(df["category_id"], errors="coerce").astype("float64")
    df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce")
    df = df.drop_duplicates("id").set_index("id", drop=False)
    df.index.name = None
    return df.sort_index()


def _prepare_edges(df: pd.DataFrame | None) -> pd.DataFrame:
    df = _with_columns(df, EDGE_COLUMNS).dropna()
    return df.astype("int64").drop_duplicates().reset_index(drop=True)


def _prepare_comments(df: pd.DataFrame | None) -> pd.DataFrame:
    df = _with_columns(df, COMMENT_COLUMNS)
    df["id"] = df["id"].astype("int64")
    df["restaurant_id"] = df["restaurant_id"].astype("int64")
    df["user_id"] = pd.to_numeric(df["user_id"], errors="coerce").astype("float64")
    df["text"] = df["text"].fillna("").astype(str)
    df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce")
    return df.sort_values(
        ["created_at", "id"], ascending=[False, False], na_position="last"
    ).reset_index(drop=True)


class DataStore:
    """Query primitives over restaurants, categories, comments and favorite/like edges."""

    def __init__(
        self,
        restaurants: pd.DataFrame,
        categories: pd.DataFrame,
        users: pd.DataFrame | None = None,
        comments: pd.DataFrame | None = None,
        favorites: pd.DataFrame | None = None,
        likes: pd.DataFrame | None = None,
    ) -> None:
        with self._guard("prepare frames"):
            self._restaurants = _prepare_restaurants(restaurants)
            categories = _with_columns(categories, CATEGORY_COLUMNS)
            self._categories = {
                int(row["id"]): Category(id=int(row["id"]), name=str(row["name"]))
                for _, row in categories.iterrows()
            }
            users = _with_columns(users, USER_COLUMNS)
            self._users = {
                int(row["id"]): User(
                    id=int(row["id"]),
                    name=str(row["name"]),
                    email=_optional_str(row["email"]),
                )
                for _, row in users.iterrows()
            }
            self._comments = _prepare_comments(comments)
            self._favorites = _prepare_edges(favorites)
            self._likes = _prepare_edges(likes)
        self._lock = threading.Lock()

    @classmethod
    def from_csv_dir(cls, config: StoreConfig = DEFAULT_STORE_CONFIG) -> DataStore:
        """Load the store from the CSV files in ``config.data_dir``."""

        def _read(filename: str, required: bool = False, **kwargs: Any) -> pd.DataFrame | None:
            path = config.data_dir / filename
            if not path.exists():
                if required:
                    raise DataAccessError(f"Missing data file: {path}")
                return None
            try:
                return pd.read_csv(path, **kwargs)
            except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
                raise DataAccessError(f"Could not read {path}") from exc

        store = cls(
            restaurants=_read(config.restaurants_filename, required=True, dtype={"tel": str}),
            categories=_read(config.categories_filename, required=True),
            users=_read(config.users_filename),
            comments=_read(config.comments_filename),
            favorites=_read(config.favorites_filename),
            likes=_read(config.likes_filename),
        )
        logger.info(
            "Loaded %d restaurants, %d categories from %s",
            len(store._restaurants),
            len(store._categories),
            config.data_dir,
        )
        return store

    @staticmethod
    @contextmanager
    def _guard(operation: str) -> Iterator[None]:
        try:
            yield
        except DataAccessError:
            raise
        except (KeyError, ValueError, TypeError, IndexError, OverflowError) as exc:
            raise DataAccessError(f"Data store failed during {operation}") from exc

    # ── Row conversion ───────────────────────────────────────────────────

    def _restaurant(self, row: pd.Series, model: type[Restaurant] = Restaurant, **extra: Any) -> Restaurant:
        category_id = _optional_int(row["category_id"])
        return model(
            id=int(row["id"]),
            name=str(row["name"]),
            tel=_optional_str(row["tel"]),
            address=_optional_str(row["address"]),
            opening_hours=_optional_str(row["opening_hours"]),
            description=row["description"],
            image=_optional_str(row["image"]),
            view_counts=int(row["view_counts"]),
            created_at=_timestamp(row["created_at"]),
            category=self._categories.get(category_id) if category_id is not None else None,
            **extra,
        )

    def _restaurants_from(self, df: pd.DataFrame) -> list[Restaurant]:
        return [self._restaurant(row) for _, row in df.iterrows()]

    def _comment(self, row: pd.Series, with_restaurant: bool) -> Comment:
        restaurant_id = int(row["restaurant_id"])
        restaurant = None
        if with_restaurant and restaurant_id in self._restaurants.index:
            restaurant = self._restaurant(self._restaurants.loc[restaurant_id])
        user_id = _optional_int(row["user_id"])
        return Comment(
            id=int(row["id"]),
            text=row["text"],
            created_at=_timestamp(row["created_at"]),
            restaurant_id=restaurant_id,
            user=self._users.get(user_id) if user_id is not None else None,
            restaurant=restaurant,
        )

    # ── Query primitives ─────────────────────────────────────────────────

    def fetch_restaurants(
        self,
        category_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Restaurant], int]:
        """Return one page of restaurants (ascending id) and the total matching count."""
        with self._guard("fetch_restaurants"):
            df = self._restaurants
            if category_id is not None:
                # Ids outside int64 cannot match any stored row
                df = df[df["category_id"] == category_id] if _fits_int64(category_id) else df.iloc[0:0]
            total = len(df)
            end = None if limit is None else offset + limit
            return self._restaurants_from(df.iloc[offset:end]), total

    def fetch_categories(self) -> list[Category]:
        return [self._categories[cid] for cid in sorted(self._categories)]

    def fetch_restaurant_by_id(self, restaurant_id: int) -> RestaurantRecord | None:
        with self._guard("fetch_restaurant_by_id"):
            if not _fits_int64(restaurant_id) or restaurant_id not in self._restaurants.index:
                return None
            row = self._restaurants.loc[restaurant_id]
            favorites = self._favorites[self._favorites["restaurant_id"] == restaurant_id]
            likes = self._likes[self._likes["restaurant_id"] == restaurant_id]
            return self._restaurant(
                row,
                model=RestaurantRecord,
                favorited_user_ids=favorites["user_id"].tolist(),
                liked_user_ids=likes["user_id"].tolist(),
            )

    def fetch_comments(
        self,
        restaurant_id: int | None = None,
        limit: int | None = None,
        with_restaurant: bool = False,
    ) -> list[Comment]:
        """Comments newest first, with their author (and optionally restaurant) joined."""
        with self._guard("fetch_comments"):
            df = self._comments
            if restaurant_id is not None:
                df = df[df["restaurant_id"] == restaurant_id]
            if limit is not None:
                df = df.head(limit)
            return [self._comment(row, with_restaurant) for _, row in df.iterrows()]

    def increment_view_count(self, restaurant_id: int) -> int:
        """Atomically add one view and return the new count."""
        with self._lock, self._guard("increment_view_count"):
            if restaurant_id not in self._restaurants.index:
                raise DataAccessError(f"No restaurant {restaurant_id} to increment")
            count = int(self._restaurants.at[restaurant_id, "view_counts"]) + 1
            self._restaurants.at[restaurant_id, "view_counts"] = count
            return count

    def aggregate_favorite_counts(self) -> list[tuple[int, int]]:
        """``(restaurant_id, count)`` for every existing restaurant with a favorite."""
        with self._guard("aggregate_favorite_counts"):
            favorites = self._favorites[self._favorites["restaurant_id"].isin(self._restaurants.index)]
            counts = favorites.groupby("restaurant_id").size()
            return [(int(rid), int(count)) for rid, count in counts.items()]

    def fetch_restaurants_by_ids(self, ids: Iterable[int]) -> list[Restaurant]:
        with self._guard("fetch_restaurants_by_ids"):
            ids = list(ids)
            if not ids:
                return []
            return self._restaurants_from(self._restaurants[self._restaurants.index.isin(ids)])

    def fetch_restaurants_excluding_ids(self, ids: Iterable[int], limit: int) -> list[Restaurant]:
        """Up to ``limit`` restaurants not in ``ids``, ascending id."""
        if limit <= 0:
            return []
        with self._guard("fetch_restaurants_excluding_ids"):
            df = self._restaurants[~self._restaurants.index.isin(list(ids))]
            return self._restaurants_from(df.head(limit))

    def fetch_latest_restaurants(self, limit: int) -> list[Restaurant]:
        with self._guard("fetch_latest_restaurants"):
            df = self._restaurants.sort_values(
                ["created_at", "id"], ascending=[False, False], na_position="last"
            )
            return self._restaurants_from(df.head(limit))

    def count_comments(self, restaurant_id: int) -> int:
        return int((self._comments["restaurant_id"] == restaurant_id).sum())

    def count_favorites(self, restaurant_id: int) -> int:
        return int((self._favorites["restaurant_id"] == restaurant_id).sum())

    def favorited_restaurant_ids(self, user_id: int) -> set[int]:
        return set(self._favorites.loc[self._favorites["user_id"] == user_id, "restaurant_id"].tolist())

    def liked_restaurant_ids(self, user_id: int) -> set[int]:
        return set(self._likes.loc[self._likes["user_id"] == user_id, "restaurant_id"].tolist())


_store: DataStore | None = None
_store_lock = threading.Lock()


def get_store() -> DataStore:
    """Return the process-wide store, loading it once on first call."""
    global _store
    store = _store
    if store is None:
        with _store_lock:
            if _store is None:
                _store = DataStore.from_csv_dir()
            store = _store
    return store


def set_store(store: DataStore | None) -> None:
    """Replace the process-wide store; ``None`` forces a reload on next use."""
    global _store
    with _store_lock:
        _store = store
