from __future__ import annotations

from fastapi.testclient import TestClient

from restaurant_forum.app import app

client = TestClient(app)


def _login_user(c):
    return c.post("/auth/login", json={"email": "user1@example.com", "password": "12345678"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_user():
    resp = _login_user(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["id"] == 2
    assert body["user"]["email"] == "user1@example.com"
    assert "password_hash" not in body["user"]


def test_login_success_admin():
    resp = client.post("/auth/login", json={"email": "root@example.com", "password": "12345678"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"email": "user1@example.com", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 401


def test_login_validation_rejects_empty_email():
    resp = client.post("/auth/login", json={"email": "", "password": "x"})
    assert resp.status_code == 422


def test_auth_me_when_logged_in():
    _login_user(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["name"] == "user1"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_user(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    resp = client.get("/auth/me")
    assert resp.status_code == 401


def test_logout_drops_viewer_flags(client):
    _login_user(client)
    assert any(r["is_favorited"] for r in client.get("/restaurants").json()["restaurants"])
    client.post("/auth/logout")
    assert not any(r["is_favorited"] for r in client.get("/restaurants").json()["restaurants"])
