"""Repository functions for users table."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class UserRecord:
    """User record from database."""

    id: str
    name: str
    email: str
    password: str
    role: str
    created_at: str

    def to_public_dict(self) -> dict[str, Any]:
        """Fields safe to return to clients (no password hash)."""
        return {
            "userId": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


def insert_user(
    conn: sqlite3.Connection,
    user_id: str,
    name: str,
    email: str,
    password_hash: str,
    role: str,
) -> None:
    """Insert a new user.

    Raises:
        sqlite3.IntegrityError: If email already exists
    """
    conn.execute(
        "INSERT INTO users (id, name, email, password, role) VALUES (?, ?, ?, ?, ?)",
        (user_id, name, email, password_hash, role),
    )
    logger.debug("users.inserted", user_id=user_id, role=role)


def get_user_by_email(conn: sqlite3.Connection, email: str) -> UserRecord | None:
    row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def get_user_by_id(conn: sqlite3.Connection, user_id: str) -> UserRecord | None:
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def _row_to_record(row) -> UserRecord:
    """Convert database row to UserRecord."""
    return UserRecord(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password=row["password"],
        role=row["role"],
        created_at=row["created_at"],
    )
