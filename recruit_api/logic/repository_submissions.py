"""Submission data access helpers.

A submission is the (form, user) container for answers. It is created lazily
the first time a user opens a form; the UNIQUE(form_id, user_id) constraint
makes concurrent first visits converge on one row.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError

from recruit_api.db.base import get_engine

logger = logging.getLogger(__name__)


def _find_submission(conn, form_id: int, user_id: int) -> Dict[str, Any] | None:  # type: ignore[no-untyped-def]
    row = conn.execute(
        sql_text("SELECT id, form_id, user_id FROM submission WHERE form_id = :fid AND user_id = :uid"),
        {"fid": form_id, "uid": user_id},
    ).mappings().fetchone()
    return dict(row) if row else None


def create_or_get_submission(form_id: int, user_id: int) -> Dict[str, Any]:
    """Return the user's submission for ``form_id``, creating it if absent."""
    eng = get_engine()
    with eng.begin() as conn:
        existing = _find_submission(conn, form_id, user_id)
        if existing:
            return existing
    try:
        with eng.begin() as conn:
            row = conn.execute(
                sql_text(
                    "INSERT INTO submission (form_id, user_id) VALUES (:fid, :uid) RETURNING id"
                ),
                {"fid": form_id, "uid": user_id},
            ).fetchone()
            logger.info("submission_created id=%s form_id=%s user_id=%s", row[0], form_id, user_id)
            return {"id": int(row[0]), "form_id": form_id, "user_id": user_id}
    except IntegrityError:
        # Another request won the race; read its row. A missing form or user
        # also lands here and must keep propagating.
        with eng.connect() as conn:
            existing = _find_submission(conn, form_id, user_id)
        if existing is None:
            raise
        logger.info("submission_create_race_resolved id=%s", existing["id"])
        return existing


def get_submission(submission_id: int, user_id: int) -> Dict[str, Any] | None:
    """Return ``{id, form_id, user_id, answers: [{question_id, answer}]}`` or None.

    Submissions belonging to another user read as missing.
    """
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT id, form_id, user_id FROM submission WHERE id = :id AND user_id = :uid"),
            {"id": submission_id, "uid": user_id},
        ).mappings().fetchone()
        if row is None:
            return None
        answers = conn.execute(
            sql_text(
                """
                SELECT question_id, answer
                FROM submission_answer
                WHERE submission_id = :sid
                ORDER BY question_id ASC
                """
            ),
            {"sid": submission_id},
        ).mappings().all()
    result = dict(row)
    result["answers"] = [dict(a) for a in answers]
    return result


def save_answers(submission_id: int, user_id: int, answers: Iterable[Mapping[str, Any]]) -> Optional[int]:
    """Upsert ``{question_id, answer}`` pairs; returns how many were written.

    Returns None when the submission does not exist or belongs to another
    user. Only questions belonging to the submission's form are accepted;
    others are skipped.
    """
    written = 0
    eng = get_engine()
    with eng.begin() as conn:
        owned = conn.execute(
            sql_text("SELECT 1 FROM submission WHERE id = :sid AND user_id = :uid"),
            {"sid": submission_id, "uid": user_id},
        ).fetchone()
        if owned is None:
            logger.info("answers_rejected_not_owner submission_id=%s user_id=%s", submission_id, user_id)
            return None
        for item in answers:
            params = {"sid": submission_id, "qid": int(item["question_id"]), "answer": item.get("answer")}
            belongs = conn.execute(
                sql_text(
                    """
                    SELECT 1
                    FROM question
                    JOIN sections ON question.section_id = sections.id
                    JOIN submission ON submission.form_id = sections.form_id
                    WHERE question.id = :qid AND submission.id = :sid
                    """
                ),
                params,
            ).fetchone()
            if belongs is None:
                logger.info("answer_skipped_foreign_question submission_id=%s question_id=%s", submission_id, params["qid"])
                continue
            updated = conn.execute(
                sql_text(
                    "UPDATE submission_answer SET answer = :answer WHERE submission_id = :sid AND question_id = :qid"
                ),
                params,
            )
            if not updated.rowcount:
                conn.execute(
                    sql_text(
                        "INSERT INTO submission_answer (submission_id, question_id, answer) VALUES (:sid, :qid, :answer)"
                    ),
                    params,
                )
            written += 1
    return written


__all__ = ["create_or_get_submission", "get_submission", "save_answers"]
