from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from .models import ViewerContext


def _as_dict(item: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump()
    return dict(item)


def viewer_sets(viewer: ViewerContext | None) -> tuple[frozenset[int], frozenset[int]]:
    """The viewer's favorited and liked ids; empty for anonymous viewers."""
    if viewer is None or viewer.is_anonymous:
        return frozenset(), frozenset()
    return viewer.favorited_ids, viewer.liked_ids


def annotate(
    items: Iterable[Mapping[str, Any] | BaseModel],
    viewer: ViewerContext | None,
) -> list[dict[str, Any]]:
    """Attach ``is_favorited`` / ``is_liked`` to each item, keeping order."""
    favorited, liked = viewer_sets(viewer)

    annotated: list[dict[str, Any]] = []
    for item in items:
        row = _as_dict(item)
        row["is_favorited"] = row["id"] in favorited
        row["is_liked"] = row["id"] in liked
        annotated.append(row)
    return annotated


def viewer_flags(restaurant_id: int, viewer: ViewerContext | None) -> tuple[bool, bool]:
    """Return ``(is_favorited, is_liked)`` for a single restaurant."""
    favorited, liked = viewer_sets(viewer)
    return restaurant_id in favorited, restaurant_id in liked
