"""Nested form document builder.

Collapses the flat Form→Section→Question→MCAnswer LEFT JOIN row set into the
nested document served by ``GET /form/{id}/all``. Pure function: no I/O.

Sections and questions are stable-sorted on (order, id) so gaps or duplicate
``order`` values still yield a deterministic document. Empty collections are
``[]``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping


def _sort_key(node: Mapping[str, Any]) -> tuple:
    order = node.get("order")
    return (order if order is not None else 0, node.get("id") or 0)


def build_form_tree(form: Mapping[str, Any], rows: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Build the nested document for ``form`` (``{id, name}``) from join rows.

    Each row carries ``section_*`` columns and, when the section has visible
    questions, ``question_*`` and ``mc_*`` columns (NULL otherwise).
    """
    sections: Dict[int, Dict[str, Any]] = {}
    questions: Dict[int, Dict[str, Any]] = {}

    for row in rows:
        sid = row["section_id"]
        section = sections.get(sid)
        if section is None:
            section = {
                "type": "Section",
                "id": sid,
                "order": row["section_order"],
                "name": row["section_name"],
                "description": row["section_description"],
                "questions": [],
            }
            sections[sid] = section

        qid = row.get("question_id")
        if qid is None:
            continue
        question = questions.get(qid)
        if question is None:
            question = {
                "type": "Question",
                "id": qid,
                "question": row["question"],
                "description": row["question_description"],
                "order": row["question_order"],
                "answer_type": row["answer_type"],
                "multiple_choice_answers": [],
            }
            questions[qid] = question
            section["questions"].append(question)

        mc_id = row.get("mc_id")
        if mc_id is not None:
            question["multiple_choice_answers"].append(
                {"type": "MCAnswer", "id": mc_id, "answer": row["mc_answer"]}
            )

    ordered_sections = sorted(sections.values(), key=_sort_key)
    for section in ordered_sections:
        section["questions"].sort(key=_sort_key)
        for question in section["questions"]:
            question["multiple_choice_answers"].sort(key=lambda c: c["id"])

    return {
        "type": "Form",
        "id": form["id"],
        "name": form["name"],
        "sections": ordered_sections,
    }


__all__ = ["build_form_tree"]
