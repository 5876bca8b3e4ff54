from __future__ import annotations

import logging
import math
from typing import Any

from .errors import InvalidInput
from .models import PageLink, Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1


def coerce_positive_int(value: Any) -> int:
    """Convert a query value to an int >= 1, raising ``InvalidInput`` otherwise."""
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"expected a positive integer, got {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidInput(f"expected a positive integer, got {value!r}")
        number = int(value)
    else:
        raw = str(value).strip()
        try:
            number = int(raw)
        except ValueError as exc:
            raise InvalidInput(f"expected a positive integer, got {value!r}") from exc
    if number < 1:
        raise InvalidInput(f"expected a positive integer, got {value!r}")
    return number


def parse_positive_int(value: Any, default: int | None) -> int | None:
    """Return ``value`` as a positive int, or ``default`` when it is missing or malformed."""
    if value is None or value == "":
        return default
    try:
        return coerce_positive_int(value)
    except InvalidInput:
        logger.debug("Falling back to default %r for query value %r", default, value)
        return default


def parse_category_id(value: Any) -> int | None:
    """Category filter from a query value; anything unusable means no filter."""
    return parse_positive_int(value, None)


def get_offset(limit: int, page: int) -> int:
    return (page - 1) * limit


def paginate(limit: Any, page: Any, total_count: Any, default_limit: int = 9) -> Pagination:
    """
    Build the offset and page links for one listing page.

    ``limit`` and ``page`` may be raw query values; malformed ones fall back
    to ``default_limit`` and page 1. A page past the end is allowed and
    simply selects no rows.
    """
    limit = parse_positive_int(limit, default_limit)
    page = parse_positive_int(page, DEFAULT_PAGE)
    try:
        total_count = max(0, int(total_count))
    except (TypeError, ValueError):
        total_count = 0

    total_pages = math.ceil(total_count / limit)
    pages = [PageLink(page=i, is_current=i == page) for i in range(1, total_pages + 1)]

    return Pagination(
        limit=limit,
        page=page,
        total_count=total_count,
        offset=get_offset(limit, page),
        total_pages=total_pages,
        pages=pages,
        prev=page - 1 if page > 1 else None,
        next=page + 1 if page < total_pages else None,
    )
