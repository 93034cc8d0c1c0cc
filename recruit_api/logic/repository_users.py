"""User data access helpers.

Keeps route handlers free of inline SQL. Public projections never include the
password digest; ``get_credentials`` is the only reader of that column.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import text as sql_text

from recruit_api.db.base import get_engine

_PUBLIC_COLUMNS = 'id, username, first_name, last_name, email'


def create_user(
    username: str,
    password_digest: str,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
) -> int:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text(
                """
                INSERT INTO "user" (username, password, first_name, last_name, email)
                VALUES (:username, :password, :first_name, :last_name, :email)
                RETURNING id
                """
            ),
            {
                "username": username,
                "password": password_digest,
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
            },
        ).fetchone()
    return int(row[0])


def get_user(user_id: int) -> Dict[str, Any] | None:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(f'SELECT {_PUBLIC_COLUMNS} FROM "user" WHERE id = :id'),
            {"id": user_id},
        ).mappings().fetchone()
    return dict(row) if row else None


def get_credentials(username: str) -> Dict[str, Any] | None:
    """Return ``{id, username, password}`` for login checks."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text('SELECT id, username, password FROM "user" WHERE username = :username'),
            {"username": username},
        ).mappings().fetchone()
    return dict(row) if row else None


def search_users(term: str, limit: int = 25) -> List[Dict[str, Any]]:
    """Case-insensitive substring match over username, names and email."""
    term = (term or "").strip().lower()
    if not term:
        return []
    pattern = f"%{term}%"
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"""
                SELECT {_PUBLIC_COLUMNS}
                FROM "user"
                WHERE LOWER(username) LIKE :p
                   OR LOWER(COALESCE(first_name, '')) LIKE :p
                   OR LOWER(COALESCE(last_name, '')) LIKE :p
                   OR LOWER(COALESCE(email, '')) LIKE :p
                ORDER BY username ASC
                LIMIT :limit
                """
            ),
            {"p": pattern, "limit": int(limit)},
        ).mappings().all()
    return [dict(r) for r in rows]


__all__ = ["create_user", "get_user", "get_credentials", "search_users"]
