from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from ..directory.data_store import DataStore, get_store
from ..directory.models import ViewerContext


def get_current_user(request: Request) -> dict | None:
    """Return the user dict from the session, or ``None``."""
    return request.session.get("user")


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_viewer(
    user: dict | None = Depends(get_current_user),
    store: DataStore = Depends(get_store),
) -> ViewerContext:
    """Build the viewer's favorited/liked sets once per request."""
    if not user:
        return ViewerContext.anonymous()
    user_id = user["id"]
    return ViewerContext(
        user_id=user_id,
        favorited_ids=store.favorited_restaurant_ids(user_id),
        liked_ids=store.liked_restaurant_ids(user_id),
    )
