from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed the demo accounts; ids match ``data/users.csv``."""
    _users["root@example.com"] = {
        "id": 1, "name": "root", "password_hash": _hash_password("12345678"), "role": "admin",
    }
    _users["user1@example.com"] = {
        "id": 2, "name": "user1", "password_hash": _hash_password("12345678"), "role": "user",
    }
    _users["user2@example.com"] = {
        "id": 3, "name": "user2", "password_hash": _hash_password("12345678"), "role": "user",
    }


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, name, email, role}`` or ``None``."""
    record = _users.get(email)
    if record and _verify_password(password, record["password_hash"]):
        return {"id": record["id"], "name": record["name"], "email": email, "role": record["role"]}
    return None


_seed_users()
