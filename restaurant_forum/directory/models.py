from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field


class Category(BaseModel):
    id: int
    name: str


class User(BaseModel):
    id: int
    name: str
    email: str | None = None


class Restaurant(BaseModel):
    id: int
    name: str
    tel: str | None = None
    address: str | None = None
    opening_hours: str | None = None
    description: str = ""
    image: str | None = None
    view_counts: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    category: Category | None = None


class RestaurantRecord(Restaurant):
    """A single restaurant with its favoriting/liking users joined in."""

    favorited_user_ids: list[int] = Field(default_factory=list)
    liked_user_ids: list[int] = Field(default_factory=list)


class Comment(BaseModel):
    id: int
    text: str
    created_at: datetime | None = None
    restaurant_id: int
    user: User | None = None
    restaurant: Restaurant | None = None


@dataclass(frozen=True)
class ViewerContext:
    """The requesting user's favorited and liked restaurant ids."""

    user_id: int | None = None
    favorited_ids: frozenset[int] = field(default_factory=frozenset)
    liked_ids: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> ViewerContext:
        return cls()

    def __post_init__(self) -> None:
        # Callers may pass lists; membership checks need sets.
        object.__setattr__(self, "favorited_ids", frozenset(self.favorited_ids))
        object.__setattr__(self, "liked_ids", frozenset(self.liked_ids))

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


# ── View models ──────────────────────────────────────────────────────────


class PageLink(BaseModel):
    page: int
    is_current: bool


class Pagination(BaseModel):
    limit: int
    page: int
    total_count: int
    offset: int
    total_pages: int
    pages: list[PageLink]
    prev: int | None = None
    next: int | None = None


class RestaurantListItem(Restaurant):
    is_favorited: bool = False
    is_liked: bool = False


class RestaurantList(BaseModel):
    restaurants: list[RestaurantListItem]
    categories: list[Category]
    category_id: int | None = None
    pagination: Pagination


class RankedRestaurant(Restaurant):
    favorited_count: int = Field(default=0, ge=0)
    is_favorited: bool = False


class RestaurantDetail(BaseModel):
    restaurant: Restaurant
    is_favorited: bool
    is_liked: bool
    comments: list[Comment]


class Dashboard(BaseModel):
    restaurant: Restaurant
    comment_count: int
    favorite_count: int


class Feeds(BaseModel):
    restaurants: list[Restaurant]
    comments: list[Comment]


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
