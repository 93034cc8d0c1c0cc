"""Pipeline, pipeline status and user status data access helpers.

Each function is a single parameterised statement (or one short transaction
where statuses are renumbered). Updates and deletes aimed at ids that do not
exist affect no rows and still succeed; callers do not distinguish that case.
Removing a pipeline or a status leaves dependent rows to the database's
``ON DELETE CASCADE`` rules.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text as sql_text

from recruit_api.db.base import get_engine
from recruit_api.logic.order_sequences import renumber_statuses

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

def list_pipelines() -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text("SELECT name FROM pipeline ORDER BY id ASC")).mappings().all()
    return [dict(r) for r in rows]


def get_pipeline_detail(pipeline_id: int) -> List[Dict[str, Any]]:
    """Return the flat Kanban row set for a pipeline.

    One row per assigned user, ordered by column position; grouping into
    columns is left to the client.
    """
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT pipeline.name AS pipeline_name,
                       pipeline_status.id AS pipeline_status_id,
                       pipeline_status.name AS pipeline_status_name,
                       pipeline_status."order" AS "order",
                       "user".id AS user_id,
                       "user".username AS username
                FROM user_status
                JOIN pipeline_status ON user_status.pipeline_status_id = pipeline_status.id
                JOIN pipeline ON pipeline_status.pipeline_id = pipeline.id
                JOIN "user" ON user_status.user_id = "user".id
                WHERE pipeline.id = :pid
                ORDER BY pipeline_status."order" ASC, pipeline_status.id ASC, "user".id ASC
                """
            ),
            {"pid": pipeline_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def create_pipeline(name: str) -> int:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text("INSERT INTO pipeline (name) VALUES (:name) RETURNING id"),
            {"name": name},
        ).fetchone()
    return int(row[0])


def rename_pipeline(pipeline_id: int, name: str) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text("UPDATE pipeline SET name = :name WHERE id = :id"),
            {"name": name, "id": pipeline_id},
        )


def delete_pipeline(pipeline_id: int) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(sql_text("DELETE FROM pipeline WHERE id = :id"), {"id": pipeline_id})


# ---------------------------------------------------------------------------
# Pipeline statuses (Kanban columns)
# ---------------------------------------------------------------------------

def list_statuses(pipeline_id: int) -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT id, pipeline_id, name, "order"
                FROM pipeline_status
                WHERE pipeline_id = :pid
                ORDER BY "order" ASC, id ASC
                """
            ),
            {"pid": pipeline_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def create_status(pipeline_id: int, order: Optional[int], name: str) -> int:
    """Insert a column and renumber the pipeline so it lands at ``order``.

    ``order`` None appends the column at the end.
    """
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text(
                """
                INSERT INTO pipeline_status (pipeline_id, "order", name)
                VALUES (:pid, :order, :name)
                RETURNING id
                """
            ),
            {"pid": pipeline_id, "order": order if order is not None else 2**31 - 1, "name": name},
        ).fetchone()
        status_id = int(row[0])
        renumber_statuses(conn, pipeline_id, pinned_id=status_id, position=order)
    return status_id


def update_status(status_id: int, order: Optional[int], name: str) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text("SELECT pipeline_id FROM pipeline_status WHERE id = :id"),
            {"id": status_id},
        ).fetchone()
        if row is None:
            logger.info("update_status_no_row status_id=%s", status_id)
            return
        conn.execute(
            sql_text("UPDATE pipeline_status SET name = :name WHERE id = :id"),
            {"name": name, "id": status_id},
        )
        renumber_statuses(conn, int(row[0]), pinned_id=status_id, position=order)


def delete_status(status_id: int) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text("SELECT pipeline_id FROM pipeline_status WHERE id = :id"),
            {"id": status_id},
        ).fetchone()
        conn.execute(sql_text("DELETE FROM pipeline_status WHERE id = :id"), {"id": status_id})
        if row is not None:
            renumber_statuses(conn, int(row[0]))


# ---------------------------------------------------------------------------
# User statuses (card placement)
# ---------------------------------------------------------------------------

def assign_user(user_id: int, pipeline_status_id: int) -> int:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text(
                """
                INSERT INTO user_status (user_id, pipeline_status_id)
                VALUES (:uid, :psid)
                RETURNING id
                """
            ),
            {"uid": user_id, "psid": pipeline_status_id},
        ).fetchone()
    return int(row[0])


def move_user(user_id: int, new_status_id: int) -> int:
    """Point the user's card in the new status's pipeline at ``new_status_id``.

    Unconditional: any column may move to any other and no history is kept.
    Returns the number of rows updated.
    """
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(
            sql_text(
                """
                UPDATE user_status
                SET pipeline_status_id = :new_psid
                WHERE user_id = :uid
                  AND pipeline_status_id IN (
                      SELECT id FROM pipeline_status
                      WHERE pipeline_id = (
                          SELECT pipeline_id FROM pipeline_status WHERE id = :new_psid
                      )
                  )
                """
            ),
            {"new_psid": new_status_id, "uid": user_id},
        )
    return int(result.rowcount or 0)


def remove_user_status(user_id: int, pipeline_id: int) -> int:
    """Take the user off every column of ``pipeline_id``; returns rows removed."""
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(
            sql_text(
                """
                DELETE FROM user_status
                WHERE user_id = :uid
                  AND pipeline_status_id IN (
                      SELECT id FROM pipeline_status WHERE pipeline_id = :pid
                  )
                """
            ),
            {"uid": user_id, "pid": pipeline_id},
        )
    return int(result.rowcount or 0)


def count_user_statuses(pipeline_status_id: int) -> int:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT COUNT(*) FROM user_status WHERE pipeline_status_id = :psid"),
            {"psid": pipeline_status_id},
        ).fetchone()
    return int(row[0]) if row else 0


__all__ = [
    "list_pipelines",
    "get_pipeline_detail",
    "create_pipeline",
    "rename_pipeline",
    "delete_pipeline",
    "list_statuses",
    "create_status",
    "update_status",
    "delete_status",
    "assign_user",
    "move_user",
    "remove_user_status",
    "count_user_statuses",
]
