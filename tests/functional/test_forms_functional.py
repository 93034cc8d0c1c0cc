"""Functional tests for the form builder routes and whole-form edits."""

from __future__ import annotations

from sqlalchemy import text as sql_text

from recruit_api.db.base import get_engine


def _build_form(client):
    """Create a form with one section holding a multiple-choice question."""
    form_id = client.post("/api/form", json={"name": "Onboarding"}).json()["id"]
    section_id = client.post(
        f"/api/form/{form_id}/sections", json={"name": "About you", "description": "Basics"}
    ).json()["id"]
    question_id = client.post(
        f"/api/section/{section_id}/questions",
        json={
            "question": "Preferred stack?",
            "answer_type": "multiple choice",
            "multiple_choice_answers": ["Python", "Go"],
        },
    ).json()["id"]
    return form_id, section_id, question_id


def test_create_form_returns_id_and_name_without_sections(auth_client):
    resp = auth_client.post("/api/form", json={"name": "Onboarding"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Onboarding"
    tree = auth_client.get(f"/api/form/{body['id']}/all").json()
    assert tree == {"type": "Form", "id": body["id"], "name": "Onboarding", "sections": []}


def test_create_form_without_name_is_rejected(auth_client):
    resp = auth_client.post("/api/form", json={})
    assert resp.status_code == 400
    assert auth_client.get("/api/form").json() == []


def test_unknown_form_returns_404(client):
    resp = client.get("/api/form/4242/all")
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("application/problem+json")


def test_form_document_is_nested_and_typed(auth_client):
    form_id, section_id, question_id = _build_form(auth_client)

    tree = auth_client.get(f"/api/form/{form_id}/all").json()

    assert tree["type"] == "Form"
    (section,) = tree["sections"]
    assert section["type"] == "Section"
    assert (section["id"], section["name"], section["description"], section["order"]) == (
        section_id,
        "About you",
        "Basics",
        1,
    )
    (question,) = section["questions"]
    assert question["type"] == "Question"
    assert question["id"] == question_id
    assert question["answer_type"] == "multiple choice"
    assert [(c["type"], c["answer"]) for c in question["multiple_choice_answers"]] == [
        ("MCAnswer", "Python"),
        ("MCAnswer", "Go"),
    ]


def test_sections_are_listed_in_order(auth_client):
    form_id = auth_client.post("/api/form", json={"name": "Onboarding"}).json()["id"]
    auth_client.post(f"/api/form/{form_id}/sections", json={"name": "Second", "order": 2})
    auth_client.post(f"/api/form/{form_id}/sections", json={"name": "First", "order": 1})

    sections = auth_client.get(f"/api/form/{form_id}/sections").json()

    assert [s["name"] for s in sections] == ["First", "Second"]


def test_archived_question_is_hidden_but_kept(auth_client):
    form_id, _, question_id = _build_form(auth_client)

    assert auth_client.put(f"/api/question/{question_id}/archive").status_code == 200

    tree = auth_client.get(f"/api/form/{form_id}/all").json()
    assert tree["sections"][0]["questions"] == []
    with get_engine().connect() as conn:
        archived = conn.execute(
            sql_text("SELECT archived FROM question WHERE id = :id"), {"id": question_id}
        ).scalar()
    assert bool(archived) is True


def test_rename_and_delete_form(auth_client):
    form_id, _, _ = _build_form(auth_client)

    assert auth_client.put(f"/api/form/{form_id}/name", json={"name": "Intake"}).status_code == 200
    assert auth_client.get("/api/form").json() == [{"id": form_id, "name": "Intake"}]

    assert auth_client.delete(f"/api/form/{form_id}").status_code == 204
    assert auth_client.get(f"/api/form/{form_id}/all").status_code == 404
    with get_engine().connect() as conn:
        assert conn.execute(sql_text("SELECT COUNT(*) FROM question")).scalar() == 0


def test_editing_question_text_archives_and_reinserts(auth_client):
    form_id, _, question_id = _build_form(auth_client)
    old = auth_client.get(f"/api/form/{form_id}/all").json()
    new = {**old, "sections": [dict(s) for s in old["sections"]]}
    edited_question = {**old["sections"][0]["questions"][0], "question": "Favourite language?"}
    new["sections"][0]["questions"] = [edited_question]

    resp = auth_client.put(f"/api/form/{form_id}", json={"OldForm": old, "NewForm": new})

    assert resp.status_code == 200
    assert resp.json() == {"insert": 3, "update": 0, "archive": 1, "delete": 0}
    (question,) = auth_client.get(f"/api/form/{form_id}/all").json()["sections"][0]["questions"]
    assert question["id"] != question_id
    assert question["question"] == "Favourite language?"
    assert [c["answer"] for c in question["multiple_choice_answers"]] == ["Python", "Go"]


def test_editing_adds_and_removes_sections(auth_client):
    form_id, section_id, _ = _build_form(auth_client)
    old = auth_client.get(f"/api/form/{form_id}/all").json()
    new = {
        "id": form_id,
        "name": "Onboarding v2",
        "sections": [
            {
                "name": "Logistics",
                "order": 1,
                "questions": [{"question": "Start date?", "order": 1}],
            }
        ],
    }

    resp = auth_client.put(f"/api/form/{form_id}", json={"OldForm": old, "NewForm": new})

    assert resp.json() == {"insert": 2, "update": 1, "archive": 0, "delete": 1}
    tree = auth_client.get(f"/api/form/{form_id}/all").json()
    assert tree["name"] == "Onboarding v2"
    (section,) = tree["sections"]
    assert section["id"] != section_id
    assert section["name"] == "Logistics"
    assert [q["question"] for q in section["questions"]] == ["Start date?"]
    assert section["questions"][0]["answer_type"] == "short answer"


def test_editing_unknown_form_returns_404(auth_client):
    resp = auth_client.put("/api/form/4242", json={"NewForm": {"name": "Ghost", "sections": []}})
    assert resp.status_code == 404


def test_adding_a_question_to_a_missing_section_is_rejected(auth_client):
    resp = auth_client.post("/api/section/4242/questions", json={"question": "Orphan?"})
    assert resp.status_code == 400


def test_form_writes_require_a_session(client):
    assert client.post("/api/form", json={"name": "Onboarding"}).status_code == 403
    assert client.put("/api/question/1/archive").status_code == 403


def test_edit_with_repeated_question_id_is_rejected_and_changes_nothing(auth_client):
    form_id, _, _ = _build_form(auth_client)
    old = auth_client.get(f"/api/form/{form_id}/all").json()
    question = old["sections"][0]["questions"][0]
    new = {**old, "name": "Renamed", "sections": [{**old["sections"][0], "questions": [question, dict(question)]}]}

    resp = auth_client.put(f"/api/form/{form_id}", json={"OldForm": old, "NewForm": new})

    assert resp.status_code == 400
    assert auth_client.get(f"/api/form/{form_id}/all").json() == old
