from __future__ import annotations

import pytest

from restaurant_forum.directory.config import DirectoryConfig
from restaurant_forum.directory.listing import list_restaurants, truncate_description
from restaurant_forum.directory.models import ViewerContext

VIEWER = ViewerContext(user_id=2, favorited_ids={3, 5, 7}, liked_ids={3, 4})


def test_default_page_size(store):
    result = list_restaurants(store, None)
    assert len(result.restaurants) == 9
    assert result.pagination.limit == 9
    assert result.pagination.total_pages == 2
    assert [r.id for r in result.restaurants] == list(range(1, 10))


def test_second_page(store):
    result = list_restaurants(store, None, page="2")
    assert [r.id for r in result.restaurants] == [10, 11, 12]
    assert result.pagination.offset == 9


def test_page_past_end_is_empty_not_error(store):
    result = list_restaurants(store, None, page="40")
    assert result.restaurants == []
    assert result.pagination.total_count == 12


def test_descriptions_truncated_for_display_only(store):
    result = list_restaurants(store, None)
    assert all(len(r.description) <= 50 for r in result.restaurants)
    stored = store.fetch_restaurant_by_id(1)
    assert len(stored.description) > 50
    assert stored.description.startswith(result.restaurants[0].description)


def test_truncation_length_is_configurable(store):
    result = list_restaurants(store, None, config=DirectoryConfig(description_length=10))
    assert result.restaurants[0].description == "Restaurant"


def test_truncate_description_handles_missing_text():
    assert truncate_description(None, 50) == ""
    assert truncate_description("short", 50) == "short"


def test_category_filter(store):
    result = list_restaurants(store, None, category_id="2")
    assert [r.id for r in result.restaurants] == [2, 5, 8, 11]
    assert result.category_id == 2
    assert result.pagination.total_count == 4


def test_categories_are_unfiltered(store):
    filtered = list_restaurants(store, None, category_id="2")
    assert [c.id for c in filtered.categories] == [1, 2, 3]


@pytest.mark.parametrize("value", [None, "", "abc", "0", "NaN"])
def test_unusable_category_filter_matches_no_filter(store, value):
    unfiltered = list_restaurants(store, None)
    result = list_restaurants(store, None, category_id=value)
    assert result.category_id is None
    assert [r.id for r in result.restaurants] == [r.id for r in unfiltered.restaurants]
    assert result.pagination == unfiltered.pagination


def test_viewer_flags_applied(store):
    result = list_restaurants(store, VIEWER)
    flags = {r.id: (r.is_favorited, r.is_liked) for r in result.restaurants}
    assert flags[3] == (True, True)
    assert flags[4] == (False, True)
    assert flags[5] == (True, False)
    assert flags[1] == (False, False)


def test_anonymous_listing_has_no_flags(store):
    result = list_restaurants(store, ViewerContext.anonymous())
    assert not any(r.is_favorited or r.is_liked for r in result.restaurants)


def test_deleted_category_does_not_break_listing(store):
    result = list_restaurants(store, None, page=2)
    last = result.restaurants[-1]
    assert last.id == 12
    assert last.category is None


def test_listing_does_not_touch_view_counts(store):
    list_restaurants(store, VIEWER)
    assert store.fetch_restaurant_by_id(1).view_counts == 0


def test_category_id_beyond_int64_matches_nothing(store):
    result = list_restaurants(store, None, category_id="1" + "0" * 400)
    assert result.restaurants == []
    assert result.pagination.total_count == 0
    assert [c.id for c in result.categories] == [1, 2, 3]
