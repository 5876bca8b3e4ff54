from __future__ import annotations


class DirectoryError(Exception):
    """Base class for restaurant directory errors."""


class RestaurantNotFound(DirectoryError, LookupError):
    def __init__(self, restaurant_id: object) -> None:
        super().__init__(f"Restaurant {restaurant_id!r} does not exist")
        self.restaurant_id = restaurant_id


class InvalidInput(DirectoryError, ValueError):
    """A query value that is not a usable positive integer."""


class DataAccessError(DirectoryError):
    """The data store failed to load, query or update."""
