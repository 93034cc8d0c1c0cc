"""Building the nested form document from flat join rows."""

from __future__ import annotations

from recruit_api.logic.form_tree import build_form_tree


def _row(section_id, section_order, question_id=None, question_order=None, mc_id=None, mc_answer=None):
    return {
        "section_id": section_id,
        "section_order": section_order,
        "section_name": f"S{section_id}",
        "section_description": None,
        "question_id": question_id,
        "question": f"Q{question_id}" if question_id else None,
        "question_description": None,
        "question_order": question_order,
        "answer_type": "short answer" if question_id else None,
        "mc_id": mc_id,
        "mc_answer": mc_answer,
    }


def test_empty_form_has_empty_section_list():
    assert build_form_tree({"id": 1, "name": "F"}, []) == {"type": "Form", "id": 1, "name": "F", "sections": []}


def test_section_without_questions_has_empty_list():
    tree = build_form_tree({"id": 1, "name": "F"}, [_row(10, 1)])
    assert tree["sections"][0]["questions"] == []


def test_rows_are_grouped_and_stably_sorted():
    rows = [
        _row(20, 1, question_id=5, question_order=2, mc_id=9, mc_answer="b"),
        _row(20, 1, question_id=5, question_order=2, mc_id=7, mc_answer="a"),
        _row(20, 1, question_id=3, question_order=2),
        _row(10, 1, question_id=4, question_order=1),
        _row(30, 0),
    ]

    tree = build_form_tree({"id": 1, "name": "F"}, rows)

    # Equal orders fall back to id
    assert [s["id"] for s in tree["sections"]] == [30, 10, 20]
    section_20 = tree["sections"][2]
    assert [q["id"] for q in section_20["questions"]] == [3, 5]
    q5 = section_20["questions"][1]
    assert q5["multiple_choice_answers"] == [
        {"type": "MCAnswer", "id": 7, "answer": "a"},
        {"type": "MCAnswer", "id": 9, "answer": "b"},
    ]
    assert section_20["questions"][0]["multiple_choice_answers"] == []
    assert {s["type"] for s in tree["sections"]} == {"Section"}
