"""Kanban column order reindexing helpers.

Provides backend-authoritative, contiguous 1-based ordering for
``pipeline_status."order"``. Every status write calls ``renumber_statuses``
inside its own transaction, so a pipeline never keeps gaps or duplicate
positions: rows are stable-sorted on (order, id), the written status is
placed at its requested position, and the sequence is rewritten as 1..n.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)


def place_in_sequence(ids: Sequence[int], item_id: int, position: Optional[int]) -> List[int]:
    """Return ``ids`` with ``item_id`` moved to 1-based ``position``.

    - ``position`` None keeps the item where it is (appending if absent).
    - Positions below 1 clamp to the front; beyond the end clamp to the back.
    """
    ordered = [i for i in ids if i != item_id]
    if position is None:
        if item_id in ids:
            return list(ids)
        return ordered + [item_id]
    index = min(max(int(position), 1), len(ordered) + 1) - 1
    ordered.insert(index, item_id)
    return ordered


def renumber_statuses(
    conn: Connection,
    pipeline_id: int,
    pinned_id: Optional[int] = None,
    position: Optional[int] = None,
) -> List[int]:
    """Rewrite a pipeline's status orders as 1..n and return the final id order.

    ``pinned_id``/``position`` place one status explicitly (the one just
    created or updated); every other status keeps its relative order.
    """
    rows = conn.execute(
        sql_text(
            'SELECT id, "order" FROM pipeline_status WHERE pipeline_id = :pid ORDER BY "order" ASC, id ASC'
        ),
        {"pid": pipeline_id},
    ).fetchall()
    current = {int(r[0]): r[1] for r in rows}
    ids = list(current.keys())
    if pinned_id is not None and pinned_id in current:
        ids = place_in_sequence(ids, pinned_id, position)

    for final_order, status_id in enumerate(ids, start=1):
        if current.get(status_id) == final_order:
            continue
        conn.execute(
            sql_text('UPDATE pipeline_status SET "order" = :o WHERE id = :id'),
            {"o": final_order, "id": status_id},
        )
    logger.info("statuses_renumbered pipeline_id=%s count=%d", pipeline_id, len(ids))
    return ids


__all__ = ["place_in_sequence", "renumber_statuses"]
