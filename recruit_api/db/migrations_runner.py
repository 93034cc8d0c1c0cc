"""Lightweight SQL migrations runner.

Applies .sql files in lexical order from the dialect-specific directory under
`recruit_api/migrations/` (``postgres/`` or ``sqlite/``). Skips rollback files
and records applied filenames in the ``schema_migrations`` table so the same
migration is never applied twice.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

MIGRATIONS_ROOT = Path(__file__).resolve().parents[1] / "migrations"

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migrations ("
    "filename VARCHAR(255) PRIMARY KEY, "
    "applied_at VARCHAR(32) NOT NULL)"
)


def migrations_dir_for(engine: Engine) -> Path:
    name = (engine.dialect.name or "").lower()
    return MIGRATIONS_ROOT / ("sqlite" if name == "sqlite" else "postgres")


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        # Skip rollback scripts in forward runs
        if "rollback" in p.name.lower():
            continue
        yield p


def _exec_sql_compat(conn: Connection, sql: str) -> None:
    """Execute SQL text, tolerating multi-statement files on SQLite.

    SQLite's DB-API (pysqlite) does not allow multiple statements in a single
    execute() call, so the raw driver connection's ``executescript`` is used.
    Other dialects receive the full script as-is.
    """
    if conn.dialect.name == "sqlite":
        raw = conn.connection.driver_connection
        raw.executescript(sql)
        return
    conn.exec_driver_sql(sql)


def applied_migrations(engine: Engine) -> set[str]:
    with engine.begin() as conn:
        conn.exec_driver_sql(_JOURNAL_DDL)
        rows = conn.execute(sql_text("SELECT filename FROM schema_migrations")).fetchall()
    return {str(r[0]) for r in rows}


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations and return the filenames applied in this run."""
    root = Path(migrations_dir) if migrations_dir is not None else migrations_dir_for(engine)
    if not root.exists():
        logger.warning("migrations_dir_missing path=%s", root)
        return []

    done = applied_migrations(engine)
    applied_now: list[str] = []
    for sql_path in _iter_sql_files(root):
        fname = sql_path.name
        if fname in done:
            continue
        sql = sql_path.read_text(encoding="utf-8")
        if not sql.strip():
            continue
        with engine.begin() as conn:
            _exec_sql_compat(conn, sql)
            conn.execute(
                sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :at)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds
                    "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
        logger.info("migration_applied file=%s dialect=%s", fname, engine.dialect.name)
        applied_now.append(fname)
    return applied_now


__all__ = ["apply_migrations", "applied_migrations", "migrations_dir_for", "MIGRATIONS_ROOT"]
