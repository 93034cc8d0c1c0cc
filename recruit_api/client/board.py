"""Kanban board shaping for the pipeline view.

The server returns one flat row per placed applicant; the board groups those
rows under their status columns. Columns without applicants come from the
status list so they still render.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping


def build_board(
    statuses: Iterable[Mapping[str, Any]],
    rows: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Return ``[{id, name, order, applicants: [{id, username}]}]`` ordered by (order, id)."""
    columns: Dict[int, Dict[str, Any]] = {}
    for status in statuses:
        sid = int(status["id"])
        columns[sid] = {"id": sid, "name": status.get("name"), "order": status.get("order"), "applicants": []}

    for row in rows:
        sid = int(row["pipeline_status_id"])
        column = columns.setdefault(
            sid,
            {"id": sid, "name": row.get("pipeline_status_name"), "order": row.get("order"), "applicants": []},
        )
        user_id = row.get("user_id")
        if user_id is None:
            continue
        if any(a["id"] == user_id for a in column["applicants"]):
            continue
        column["applicants"].append({"id": user_id, "username": row.get("username")})

    return sorted(columns.values(), key=lambda c: (c["order"] if c["order"] is not None else 0, c["id"]))


def users_available_to_add(
    found_users: Iterable[Mapping[str, Any]],
    board: Iterable[Mapping[str, Any]],
) -> List[Mapping[str, Any]]:
    """Drop search results that already sit in any column of ``board``."""
    on_board = {a["id"] for column in board for a in column.get("applicants") or []}
    return [u for u in found_users if u.get("id") not in on_board]


__all__ = ["build_board", "users_available_to_add"]
