"""
Shared fixtures

A small deterministic store built from DataFrames. User 2 is the
``user1@example.com`` seeded account, so logged-in API tests see its edges.
"""
from __future__ import annotations

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from restaurant_forum.app import app
from restaurant_forum.directory.data_store import DataStore, set_store

CATEGORIES = pd.DataFrame({"id": [1, 2, 3], "name": ["Chinese", "Japanese", "Italian"]})

USERS = pd.DataFrame({
    "id": [1, 2, 3],
    "name": ["root", "user1", "user2"],
    "email": ["root@example.com", "user1@example.com", "user2@example.com"],
})

# restaurant 5: 3 favorites, restaurant 3: 2, restaurant 7: 1
FAVORITES = [(1, 5), (2, 5), (3, 5), (1, 3), (2, 3), (2, 7)]
LIKES = [(2, 3), (2, 4)]

COMMENTS = pd.DataFrame({
    "id": [1, 2, 3],
    "text": ["Great noodles", "Came back twice", "Too salty"],
    "user_id": [2, 3, 2],
    "restaurant_id": [5, 5, 3],
    "created_at": ["2024-03-01 12:00:00", "2024-03-05 18:30:00", "2024-02-01 09:00:00"],
})


def make_restaurants(count: int) -> pd.DataFrame:
    ids = list(range(1, count + 1))
    return pd.DataFrame({
        "id": ids,
        "name": [f"Restaurant {i}" for i in ids],
        "tel": [f"02-1234-{i:04d}" for i in ids],
        "address": [f"{i} Test Street" for i in ids],
        "opening_hours": ["11:00"] * count,
        "description": [f"Restaurant {i} serves " + "x" * 60 for i in ids],
        "image": [None] * count,
        "view_counts": [0] * count,
        "category_id": [(i - 1) % 3 + 1 for i in ids],
        "created_at": [pd.Timestamp("2024-01-01") + pd.Timedelta(days=i) for i in ids],
    })


def edges(pairs) -> pd.DataFrame:
    return pd.DataFrame(list(pairs), columns=["user_id", "restaurant_id"])


@pytest.fixture
def make_store():
    def _make(count: int = 12, favorites=FAVORITES, likes=LIKES, comments=COMMENTS) -> DataStore:
        restaurants = make_restaurants(count)
        if count >= 12:
            # category 99 was deleted after assignment
            restaurants.loc[restaurants["id"] == 12, "category_id"] = 99
        return DataStore(
            restaurants=restaurants,
            categories=CATEGORIES,
            users=USERS,
            comments=comments,
            favorites=edges(favorites),
            likes=edges(likes),
        )

    return _make


@pytest.fixture
def store(make_store) -> DataStore:
    return make_store()


@pytest.fixture
def client(store):
    set_store(store)
    yield TestClient(app)
    set_store(None)
