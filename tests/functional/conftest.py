"""Functional test bootstrap.

Points the application at a file-backed SQLite database before any
``recruit_api`` module reads configuration, applies the SQLite migrations
once per session and empties every table after each test.
"""

from __future__ import annotations

import os
import pathlib

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_DB_FILE}"
os.environ["SESSION_SECRET"] = "functional-test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
# Migrations are applied explicitly below
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import text as sql_text  # noqa: E402

from recruit_api.db.base import dispose_engine, get_engine  # noqa: E402
from recruit_api.db.migrations_runner import apply_migrations  # noqa: E402
from recruit_api.logic import repository_users  # noqa: E402
from recruit_api.main import create_app  # noqa: E402

# Children before parents so foreign keys never block the wipe
_TABLES = (
    "submission_answer",
    "submission",
    "multiple_choice_answers",
    "question",
    "sections",
    "forms",
    "user_status",
    "pipeline_status",
    "pipeline",
    '"user"',
)


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    dispose_engine()
    apply_migrations(get_engine())
    yield
    dispose_engine()


@pytest.fixture(autouse=True)
def clean_tables():
    engine = get_engine()
    yield
    with engine.begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """A client holding the session cookie of a freshly registered recruiter."""
    resp = client.post("/api/user/register", json={"username": "recruiter", "password": "hunter22"})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/user/login", json={"username": "recruiter", "password": "hunter22"})
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture
def make_user():
    """Insert an applicant directly; the digest is never checked."""

    def _make(username: str, **profile) -> int:
        return repository_users.create_user(username, "$2b$04$not-a-real-digest", **profile)

    return _make
