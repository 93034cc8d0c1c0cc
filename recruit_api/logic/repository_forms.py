"""Form, section and question data access helpers.

Encapsulates the SQL behind the form builder routes. The nested document is
assembled by ``form_tree.build_form_tree`` from a single join so archived
questions are filtered in the query itself.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import text as sql_text

from recruit_api.db.base import get_engine
from recruit_api.logic.form_tree import build_form_tree

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

def list_forms() -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text("SELECT id, name FROM forms ORDER BY id ASC")).mappings().all()
    return [dict(r) for r in rows]


_FORM_TREE_SQL = """
SELECT sections.id AS section_id,
       sections."order" AS section_order,
       sections.name AS section_name,
       sections.description AS section_description,
       question.id AS question_id,
       question.question AS question,
       question.description AS question_description,
       question."order" AS question_order,
       question.answer_type AS answer_type,
       multiple_choice_answers.id AS mc_id,
       multiple_choice_answers.answer AS mc_answer
FROM sections
LEFT JOIN question
       ON question.section_id = sections.id
      AND question.archived = FALSE
LEFT JOIN multiple_choice_answers
       ON multiple_choice_answers.question_id = question.id
WHERE sections.form_id = :fid
ORDER BY sections."order" ASC, sections.id ASC,
         question."order" ASC, question.id ASC,
         multiple_choice_answers.id ASC
"""


def get_form_with_sections(form_id: int) -> Dict[str, Any] | None:
    """Return the nested Form→Section→Question→MCAnswer document, or None."""
    eng = get_engine()
    with eng.connect() as conn:
        form = conn.execute(
            sql_text("SELECT id, name FROM forms WHERE id = :id"),
            {"id": form_id},
        ).mappings().fetchone()
        if form is None:
            return None
        rows = conn.execute(sql_text(_FORM_TREE_SQL), {"fid": form_id}).mappings().all()
    return build_form_tree(dict(form), [dict(r) for r in rows])


def create_form(name: str) -> int:
    eng = get_engine()
    with eng.begin() as conn:
        row = conn.execute(
            sql_text("INSERT INTO forms (name) VALUES (:name) RETURNING id"),
            {"name": name},
        ).fetchone()
    return int(row[0])


def rename_form(form_id: int, name: str) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(sql_text("UPDATE forms SET name = :name WHERE id = :id"), {"name": name, "id": form_id})


def delete_form(form_id: int) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(sql_text("DELETE FROM forms WHERE id = :id"), {"id": form_id})


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def list_sections(form_id: int) -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT id, form_id, name, description, "order"
                FROM sections
                WHERE form_id = :fid
                ORDER BY "order" ASC, id ASC
                """
            ),
            {"fid": form_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def _next_order(conn, table: str, parent_column: str, parent_id: int) -> int:  # type: ignore[no-untyped-def]
    row = conn.execute(
        sql_text(f'SELECT COALESCE(MAX("order"), 0) FROM {table} WHERE {parent_column} = :pid'),
        {"pid": parent_id},
    ).fetchone()
    return int(row[0] or 0) + 1


def create_section(form_id: int, name: str, description: str | None = None, order: Optional[int] = None) -> int:
    """Insert a section; ``order`` None appends after the form's last section."""
    eng = get_engine()
    with eng.begin() as conn:
        if order is None:
            order = _next_order(conn, "sections", "form_id", form_id)
        row = conn.execute(
            sql_text(
                """
                INSERT INTO sections (form_id, name, description, "order")
                VALUES (:fid, :name, :description, :order)
                RETURNING id
                """
            ),
            {"fid": form_id, "name": name, "description": description, "order": order},
        ).fetchone()
    return int(row[0])


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

def insert_question(conn, section_id: int, values: Dict[str, Any]) -> int:  # type: ignore[no-untyped-def]
    """Insert one question on an open connection and return its id."""
    order = values.get("order")
    if order is None:
        order = _next_order(conn, "question", "section_id", section_id)
    row = conn.execute(
        sql_text(
            """
            INSERT INTO question (section_id, question, description, "order", answer_type)
            VALUES (:sid, :question, :description, :order, :answer_type)
            RETURNING id
            """
        ),
        {
            "sid": section_id,
            "question": values["question"],
            "description": values.get("description"),
            "order": order,
            "answer_type": values.get("answer_type") or "short answer",
        },
    ).fetchone()
    return int(row[0])


def insert_choice(conn, question_id: int, answer: str) -> int:  # type: ignore[no-untyped-def]
    row = conn.execute(
        sql_text(
            "INSERT INTO multiple_choice_answers (question_id, answer) VALUES (:qid, :answer) RETURNING id"
        ),
        {"qid": question_id, "answer": answer},
    ).fetchone()
    return int(row[0])


def create_question(section_id: int, values: Dict[str, Any], choices: Iterable[str] = ()) -> int:
    """Insert a question and its multiple-choice answers in one transaction."""
    eng = get_engine()
    with eng.begin() as conn:
        question_id = insert_question(conn, section_id, values)
        for answer in choices:
            insert_choice(conn, question_id, answer)
    return question_id


def archive_question(question_id: int) -> None:
    """Hide a question from the form document; the row itself stays."""
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text("UPDATE question SET archived = TRUE, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
            {"id": question_id},
        )


__all__ = [
    "list_forms",
    "get_form_with_sections",
    "create_form",
    "rename_form",
    "delete_form",
    "list_sections",
    "create_section",
    "insert_question",
    "insert_choice",
    "create_question",
    "archive_question",
]
