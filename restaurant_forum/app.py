from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import get_viewer, require_user
from .auth.users import authenticate
from .directory.data_store import DataStore, get_store
from .directory.detail import get_dashboard, get_detail
from .directory.errors import DataAccessError, RestaurantNotFound
from .directory.feeds import get_feeds
from .directory.listing import list_restaurants
from .directory.models import (
    Dashboard,
    Feeds,
    LoginRequest,
    RankedRestaurant,
    RestaurantDetail,
    RestaurantList,
    ViewerContext,
)
from .directory.ranking import top_restaurants

logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Forum API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "restaurant-forum-secret-change-in-production"),
)


@app.exception_handler(RestaurantNotFound)
def restaurant_not_found(request: Request, exc: RestaurantNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Restaurant not found"})


@app.exception_handler(DataAccessError)
def data_access_failed(request: Request, exc: DataAccessError) -> JSONResponse:
    logger.error("Data access failed for %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Restaurant endpoints ─────────────────────────────────────────────────

# Query values stay raw strings so malformed ones fall back to defaults.


@app.get("/restaurants", response_model=RestaurantList)
def restaurants(
    categoryId: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    viewer: ViewerContext = Depends(get_viewer),
    store: DataStore = Depends(get_store),
) -> RestaurantList:
    return list_restaurants(store, viewer, category_id=categoryId, limit=limit, page=page)


@app.get("/restaurants/top", response_model=list[RankedRestaurant])
def top(
    n: str | None = None,
    viewer: ViewerContext = Depends(get_viewer),
    store: DataStore = Depends(get_store),
) -> list[RankedRestaurant]:
    return top_restaurants(store, viewer, n=n)


@app.get("/restaurants/feeds", response_model=Feeds)
def feeds(store: DataStore = Depends(get_store)) -> Feeds:
    return get_feeds(store)


@app.get("/restaurants/{restaurant_id}", response_model=RestaurantDetail)
def restaurant(
    restaurant_id: str,
    viewer: ViewerContext = Depends(get_viewer),
    store: DataStore = Depends(get_store),
) -> RestaurantDetail:
    return get_detail(store, restaurant_id, viewer)


@app.get("/restaurants/{restaurant_id}/dashboard", response_model=Dashboard)
def dashboard(
    restaurant_id: str,
    user: dict = Depends(require_user),
    store: DataStore = Depends(get_store),
) -> Dashboard:
    return get_dashboard(store, restaurant_id)
