"""Form edit reconciliation.

``plan_form_edit`` compares the stored form document with the one a client
submits and returns the ordered list of row operations that turns one into
the other. It is pure so it can be tested without a database;
``apply_form_edit`` replays a plan inside a single transaction.

Rules:

- sections missing from the new document are deleted; the cascade removes
  their questions and any submitted answers to them;
- questions missing from a kept section are archived, never deleted, so
  submitted answers keep pointing at the wording they answered;
- a question whose text, description or answer type changed is archived and
  re-inserted with its choices; an order-only change is an in-place update;
- choices are matched by id: missing ones are deleted, new ones inserted,
  changed ones updated;
- a section, question or choice id may appear only once in the new
  document; a repeated id raises ValueError.

Removals are emitted first, then inserts and updates with every parent ahead
of its children. Inserted rows get a local ``ref`` that later operations use
as their ``parent`` until the real id is known.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy import text as sql_text

from recruit_api.db.base import get_engine
from recruit_api.logic.repository_forms import insert_choice, insert_question

logger = logging.getLogger(__name__)

INSERT = "insert"
UPDATE = "update"
ARCHIVE = "archive"
DELETE = "delete"

FORM = "form"
SECTION = "section"
QUESTION = "question"
CHOICE = "choice"

Key = Union[int, str, None]


@dataclass(frozen=True)
class EditOp:
    action: str
    entity: str
    target: Key = None
    parent: Key = None
    values: Dict[str, Any] = field(default_factory=dict)


def _items(node: Mapping[str, Any] | None, key: str) -> List[Mapping[str, Any]]:
    if not node:
        return []
    return list(node.get(key) or [])


def _by_id(items: Sequence[Mapping[str, Any]]) -> Dict[int, Mapping[str, Any]]:
    return {int(i["id"]): i for i in items if i.get("id") is not None}


def _reject_duplicate_ids(new: Mapping[str, Any]) -> None:
    sections = _items(new, "sections")
    questions = [q for s in sections for q in _items(s, "questions")]
    choices = [c for q in questions for c in _items(q, "multiple_choice_answers")]
    for entity, items in ((SECTION, sections), (QUESTION, questions), (CHOICE, choices)):
        ids = [int(i["id"]) for i in items if i.get("id") is not None]
        repeated = sorted({i for i in ids if ids.count(i) > 1})
        if repeated:
            raise ValueError(f"duplicate {entity} ids in edited form: {repeated}")


def _section_values(section: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": section.get("name"),
        "description": section.get("description"),
        "order": section.get("order"),
    }


def _question_values(question: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "question": question.get("question"),
        "description": question.get("description"),
        "order": question.get("order"),
        "answer_type": question.get("answer_type"),
    }


def _content_changed(old: Mapping[str, Any], new: Mapping[str, Any]) -> bool:
    return any(old.get(k) != new.get(k) for k in ("question", "description", "answer_type"))


def _insert_question_ops(question: Mapping[str, Any], parent: Key, ref: str) -> List[EditOp]:
    ops = [EditOp(INSERT, QUESTION, target=ref, parent=parent, values=_question_values(question))]
    for choice in _items(question, "multiple_choice_answers"):
        ops.append(EditOp(INSERT, CHOICE, parent=ref, values={"answer": choice.get("answer")}))
    return ops


def plan_form_edit(old: Mapping[str, Any], new: Mapping[str, Any]) -> List[EditOp]:
    """Return the ordered operations that turn ``old`` into ``new``.

    Raises ValueError when ``new`` repeats a section, question or choice id.
    """
    _reject_duplicate_ids(new)
    removals: List[EditOp] = []
    writes: List[EditOp] = []

    if new.get("name") is not None and new.get("name") != old.get("name"):
        writes.append(EditOp(UPDATE, FORM, target=old.get("id"), values={"name": new.get("name")}))

    old_sections = _by_id(_items(old, "sections"))
    new_sections = _items(new, "sections")
    kept_section_ids = {int(s["id"]) for s in new_sections if s.get("id") is not None} & set(old_sections)

    for sid in old_sections:
        if sid not in kept_section_ids:
            removals.append(EditOp(DELETE, SECTION, target=sid))

    for i, section in enumerate(new_sections):
        sid = section.get("id")
        if sid is None or int(sid) not in kept_section_ids:
            ref = f"section:{i}"
            writes.append(EditOp(INSERT, SECTION, target=ref, values=_section_values(section)))
            for j, question in enumerate(_items(section, "questions")):
                writes.extend(_insert_question_ops(question, ref, f"question:{i}.{j}"))
            continue

        sid = int(sid)
        old_section = old_sections[sid]
        if _section_values(old_section) != _section_values(section):
            writes.append(EditOp(UPDATE, SECTION, target=sid, values=_section_values(section)))

        old_questions = _by_id(_items(old_section, "questions"))
        new_questions = _items(section, "questions")
        kept_question_ids = {int(q["id"]) for q in new_questions if q.get("id") is not None} & set(old_questions)

        for qid in old_questions:
            if qid not in kept_question_ids:
                removals.append(EditOp(ARCHIVE, QUESTION, target=qid))

        for j, question in enumerate(new_questions):
            qid = question.get("id")
            ref = f"question:{i}.{j}"
            if qid is None or int(qid) not in kept_question_ids:
                writes.extend(_insert_question_ops(question, sid, ref))
                continue

            qid = int(qid)
            old_question = old_questions[qid]
            if _content_changed(old_question, question):
                removals.append(EditOp(ARCHIVE, QUESTION, target=qid))
                writes.extend(_insert_question_ops(question, sid, ref))
                continue
            if old_question.get("order") != question.get("order"):
                writes.append(EditOp(UPDATE, QUESTION, target=qid, values={"order": question.get("order")}))

            old_choices = _by_id(_items(old_question, "multiple_choice_answers"))
            new_choices = _items(question, "multiple_choice_answers")
            kept_choice_ids = {int(c["id"]) for c in new_choices if c.get("id") is not None} & set(old_choices)
            for cid in old_choices:
                if cid not in kept_choice_ids:
                    removals.append(EditOp(DELETE, CHOICE, target=cid))
            for choice in new_choices:
                cid = choice.get("id")
                if cid is None or int(cid) not in kept_choice_ids:
                    writes.append(EditOp(INSERT, CHOICE, parent=qid, values={"answer": choice.get("answer")}))
                elif old_choices[int(cid)].get("answer") != choice.get("answer"):
                    writes.append(EditOp(UPDATE, CHOICE, target=int(cid), values={"answer": choice.get("answer")}))

    return removals + writes


def summarize(ops: Sequence[EditOp]) -> Dict[str, int]:
    counts = Counter(op.action for op in ops)
    return {action: counts.get(action, 0) for action in (INSERT, UPDATE, ARCHIVE, DELETE)}


# Every statement is scoped to the edited form so a crafted id from another
# form affects nothing.
_SECTION_IN_FORM = "SELECT id FROM sections WHERE form_id = :fid"
_QUESTION_IN_FORM = f"SELECT id FROM question WHERE section_id IN ({_SECTION_IN_FORM})"


def apply_form_edit(form_id: int, ops: Sequence[EditOp]) -> Dict[str, int]:
    """Apply ``ops`` for ``form_id`` in one transaction; returns action counts."""
    refs: Dict[str, int] = {}

    def resolve(key: Key) -> Optional[int]:
        if isinstance(key, str):
            return refs[key]
        return key

    eng = get_engine()
    with eng.begin() as conn:
        for op in ops:
            params: Dict[str, Any] = {"fid": form_id}
            if op.entity == FORM and op.action == UPDATE:
                conn.execute(sql_text("UPDATE forms SET name = :name WHERE id = :fid"), {**params, **op.values})

            elif op.entity == SECTION and op.action == DELETE:
                conn.execute(
                    sql_text("DELETE FROM sections WHERE id = :id AND form_id = :fid"),
                    {**params, "id": op.target},
                )
            elif op.entity == SECTION and op.action == INSERT:
                row = conn.execute(
                    sql_text(
                        """
                        INSERT INTO sections (form_id, name, description, "order")
                        VALUES (:fid, :name, :description, :order)
                        RETURNING id
                        """
                    ),
                    {**params, **op.values, "order": op.values.get("order") or 0},
                ).fetchone()
                refs[str(op.target)] = int(row[0])
            elif op.entity == SECTION and op.action == UPDATE:
                conn.execute(
                    sql_text(
                        """
                        UPDATE sections SET name = :name, description = :description, "order" = :order
                        WHERE id = :id AND form_id = :fid
                        """
                    ),
                    {**params, **op.values, "order": op.values.get("order") or 0, "id": op.target},
                )

            elif op.entity == QUESTION and op.action == ARCHIVE:
                conn.execute(
                    sql_text(
                        f"""
                        UPDATE question SET archived = TRUE, updated_at = CURRENT_TIMESTAMP
                        WHERE id = :id AND section_id IN ({_SECTION_IN_FORM})
                        """
                    ),
                    {**params, "id": op.target},
                )
            elif op.entity == QUESTION and op.action == INSERT:
                refs[str(op.target)] = insert_question(conn, int(resolve(op.parent)), op.values)
            elif op.entity == QUESTION and op.action == UPDATE:
                conn.execute(
                    sql_text(
                        f"""
                        UPDATE question SET "order" = :order, updated_at = CURRENT_TIMESTAMP
                        WHERE id = :id AND section_id IN ({_SECTION_IN_FORM})
                        """
                    ),
                    {**params, "order": op.values.get("order") or 0, "id": op.target},
                )

            elif op.entity == CHOICE and op.action == DELETE:
                conn.execute(
                    sql_text(
                        f"DELETE FROM multiple_choice_answers WHERE id = :id AND question_id IN ({_QUESTION_IN_FORM})"
                    ),
                    {**params, "id": op.target},
                )
            elif op.entity == CHOICE and op.action == INSERT:
                insert_choice(conn, int(resolve(op.parent)), op.values["answer"])
            elif op.entity == CHOICE and op.action == UPDATE:
                conn.execute(
                    sql_text(
                        f"""
                        UPDATE multiple_choice_answers SET answer = :answer
                        WHERE id = :id AND question_id IN ({_QUESTION_IN_FORM})
                        """
                    ),
                    {**params, "answer": op.values["answer"], "id": op.target},
                )
            else:
                raise ValueError(f"unsupported edit operation {op.action} {op.entity}")

    summary = summarize(ops)
    logger.info("form_edit_applied form_id=%s summary=%s", form_id, summary)
    return summary


__all__ = [
    "EditOp",
    "plan_form_edit",
    "apply_form_edit",
    "summarize",
    "INSERT",
    "UPDATE",
    "ARCHIVE",
    "DELETE",
    "FORM",
    "SECTION",
    "QUESTION",
    "CHOICE",
]
