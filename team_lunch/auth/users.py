from __future__ import annotations

from typing import Any
from uuid import uuid4

import bcrypt

# keyed by lower-cased email
_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "email": record["email"],
        "name": record["name"],
        "is_admin": record["is_admin"],
    }


def create_user(email: str, password: str, name: str, is_admin: bool = False) -> dict[str, Any] | None:
    """Register a user. Returns the public profile, or ``None`` if the email is taken."""
    key = email.strip().lower()
    if key in _users:
        return None
    _users[key] = {
        "id": str(uuid4()),
        "email": key,
        "name": name.strip() or key.split("@")[0],
        "is_admin": is_admin,
        "password_hash": _hash_password(password),
    }
    return _public(_users[key])


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, email, name, is_admin}`` or ``None``."""
    record = _users.get(email.strip().lower())
    if record and _verify_password(password, record["password_hash"]):
        return _public(record)
    return None


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    create_user("user@example.com", "user123", "Demo User")
    create_user("admin@example.com", "admin123", "Demo Admin", is_admin=True)


_seed_users()
