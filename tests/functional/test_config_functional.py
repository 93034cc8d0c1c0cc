"""Configuration loading precedence and validation."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from recruit_api.config import load_config

_KEYS = (
    "DATABASE_URL",
    "AUTO_APPLY_MIGRATIONS",
    "SESSION_SECRET",
    "SESSION_COOKIE",
    "SESSION_MAX_AGE",
    "SESSION_HTTPS_ONLY",
    "BCRYPT_ROUNDS",
    "CORS_ORIGINS",
)


@pytest.fixture
def bare_env(tmp_path, monkeypatch):
    """Run from an empty directory with none of the config variables set."""
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults(bare_env):
    cfg = load_config()

    assert cfg.database.url == "sqlite+pysqlite:///./recruit.db"
    assert cfg.database.auto_apply_migrations is True
    assert cfg.session.cookie_name == "recruit_session"
    assert cfg.session.https_only is False
    assert cfg.security.bcrypt_rounds == 10
    assert cfg.http.cors_origins == ["*"]


def test_environment_beats_files_and_json(bare_env, monkeypatch):
    (bare_env / "recruit_config.json").write_text(
        json.dumps({"database": {"url": "sqlite:///json.db"}, "security": {"bcrypt_rounds": 6}}),
        encoding="utf-8",
    )
    (bare_env / "config").mkdir()
    (bare_env / "config" / "database.url").write_text("sqlite:///file.db\n", encoding="utf-8")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///env.db")

    cfg = load_config()

    assert cfg.database.url == "sqlite:///env.db"
    assert cfg.security.bcrypt_rounds == 6


def test_config_files_beat_json(bare_env):
    (bare_env / "recruit_config.json").write_text(json.dumps({"database": {"url": "sqlite:///json.db"}}), encoding="utf-8")
    (bare_env / "config").mkdir()
    (bare_env / "config" / "database.url").write_text("sqlite:///file.db", encoding="utf-8")

    assert load_config().database.url == "sqlite:///file.db"


def test_heroku_style_postgres_url_is_normalised(bare_env, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/recruit")
    assert load_config().database.url == "postgresql://u:p@db:5432/recruit"


def test_cors_origins_are_split(bare_env, monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://recruit.example.com")
    assert load_config().http.cors_origins == ["http://localhost:5173", "https://recruit.example.com"]


@pytest.mark.parametrize("rounds", ["3", "32"])
def test_bcrypt_rounds_out_of_range_is_rejected(bare_env, monkeypatch, rounds):
    monkeypatch.setenv("BCRYPT_ROUNDS", rounds)
    with pytest.raises(ValidationError):
        load_config()


def test_short_session_secret_is_rejected(bare_env, monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "short")
    with pytest.raises(ValidationError):
        load_config()
