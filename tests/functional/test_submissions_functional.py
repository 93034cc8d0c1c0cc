"""Functional tests for submissions and saved answers."""

from __future__ import annotations

from fastapi.testclient import TestClient

from recruit_api.main import create_app


def _form_with_question(client):
    form_id = client.post("/api/form", json={"name": "Onboarding"}).json()["id"]
    section_id = client.post(f"/api/form/{form_id}/sections", json={"name": "About you"}).json()["id"]
    question_id = client.post(f"/api/section/{section_id}/questions", json={"question": "Name?"}).json()["id"]
    return form_id, question_id


def test_first_visit_creates_and_later_visits_reuse_the_submission(auth_client):
    form_id, _ = _form_with_question(auth_client)
    me = auth_client.get("/api/user").json()

    first = auth_client.post("/api/submission", json={"form_id": form_id})
    second = auth_client.post("/api/submission", json={"form_id": form_id})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json() == second.json()
    assert first.json()["form_id"] == form_id
    assert first.json()["user_id"] == me["id"]


def test_submission_for_unknown_form_is_rejected(auth_client):
    resp = auth_client.post("/api/submission", json={"form_id": 4242})
    assert resp.status_code == 400


def test_answers_are_saved_and_overwritten(auth_client):
    form_id, question_id = _form_with_question(auth_client)
    submission_id = auth_client.post("/api/submission", json={"form_id": form_id}).json()["id"]

    resp = auth_client.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": question_id, "answer": "Ada"}]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"id": submission_id, "written": 1}

    auth_client.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": question_id, "answer": "Ada Lovelace"}]},
    )

    body = auth_client.get(f"/api/submission/{submission_id}").json()
    assert body["answers"] == [{"question_id": question_id, "answer": "Ada Lovelace"}]


def test_answers_to_questions_of_another_form_are_skipped(auth_client):
    form_id, _ = _form_with_question(auth_client)
    _, foreign_question = _form_with_question(auth_client)
    submission_id = auth_client.post("/api/submission", json={"form_id": form_id}).json()["id"]

    resp = auth_client.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": foreign_question, "answer": "nope"}]},
    )

    assert resp.json()["written"] == 0
    assert auth_client.get(f"/api/submission/{submission_id}").json()["answers"] == []


def test_unknown_submission_returns_404(auth_client):
    assert auth_client.get("/api/submission/4242").status_code == 404


def test_submissions_require_a_session(client):
    assert client.post("/api/submission", json={"form_id": 1}).status_code == 403
    assert client.get("/api/submission/1").status_code == 403


def _second_session(username: str) -> TestClient:
    other = TestClient(create_app())
    other.post("/api/user/register", json={"username": username, "password": "pw-" + username})
    resp = other.post("/api/user/login", json={"username": username, "password": "pw-" + username})
    assert resp.status_code == 200, resp.text
    return other


def test_submissions_are_private_to_their_owner(auth_client):
    form_id, question_id = _form_with_question(auth_client)
    submission_id = auth_client.post("/api/submission", json={"form_id": form_id}).json()["id"]
    auth_client.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": question_id, "answer": "mine"}]},
    )
    intruder = _second_session("intruder")

    read = intruder.get(f"/api/submission/{submission_id}")
    write = intruder.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": question_id, "answer": "hijacked"}]},
    )

    assert read.status_code == 404
    assert "mine" not in read.text
    assert write.status_code == 404
    owner_view = auth_client.get(f"/api/submission/{submission_id}").json()
    assert owner_view["answers"] == [{"question_id": question_id, "answer": "mine"}]


def test_each_user_gets_their_own_submission_for_a_form(auth_client):
    form_id, _ = _form_with_question(auth_client)
    mine = auth_client.post("/api/submission", json={"form_id": form_id}).json()

    theirs = _second_session("applicant").post("/api/submission", json={"form_id": form_id}).json()

    assert theirs["id"] != mine["id"]
    assert theirs["user_id"] != mine["user_id"]


def test_removing_a_section_in_a_form_edit_discards_its_answers(auth_client):
    form_id, question_id = _form_with_question(auth_client)
    submission_id = auth_client.post("/api/submission", json={"form_id": form_id}).json()["id"]
    auth_client.put(
        f"/api/submission/{submission_id}/answers",
        json={"answers": [{"question_id": question_id, "answer": "Ada"}]},
    )

    resp = auth_client.put(f"/api/form/{form_id}", json={"NewForm": {"name": "Onboarding", "sections": []}})

    assert resp.json()["delete"] == 1
    assert auth_client.get(f"/api/submission/{submission_id}").json()["answers"] == []
