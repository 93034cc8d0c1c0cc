"""Configuration utilities.

This module loads application configuration with the following rules:
- Primary source: `recruit_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("recruit_config.json")
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///./recruit.db"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(value: object) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    url: str
    auto_apply_migrations: bool = Field(default=True)

    @field_validator("url")
    @classmethod
    def url_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.url must be a non-empty string")
        # Heroku-style URLs are not accepted by SQLAlchemy 2.x
        if v.startswith("postgres://"):
            v = "postgresql://" + v[len("postgres://"):]
        return v


class SessionConfig(BaseModel):
    secret: str = Field(min_length=8)
    cookie_name: str = "recruit_session"
    max_age: int = Field(default=14 * 24 * 3600, gt=0)
    https_only: bool = False


class SecurityConfig(BaseModel):
    # bcrypt cost factor; the library accepts 4..31
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)


class HttpConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    database: DatabaseConfig
    session: SessionConfig
    security: SecurityConfig
    http: HttpConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) recruit_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Database
    db_url = _env("DATABASE_URL") or _read_config_file("database.url") or _base("database.url") or DEFAULT_DATABASE_URL
    auto_migrate = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("database.auto_apply_migrations") or _base("database.auto_apply_migrations", "true")

    # Session cookie
    secret = _env("SESSION_SECRET") or _read_config_file("session.secret") or _base("session.secret", "dev-session-secret-change-me")
    cookie_name = _env("SESSION_COOKIE") or _read_config_file("session.cookie_name") or _base("session.cookie_name", "recruit_session")
    max_age = _env("SESSION_MAX_AGE") or _read_config_file("session.max_age") or _base("session.max_age", str(14 * 24 * 3600))
    https_only = _env("SESSION_HTTPS_ONLY") or _read_config_file("session.https_only") or _base("session.https_only", "false")

    # Password hashing
    rounds = _env("BCRYPT_ROUNDS") or _read_config_file("security.bcrypt_rounds") or _base("security.bcrypt_rounds", "10")

    # CORS
    origins_text = _env("CORS_ORIGINS") or _read_config_file("http.cors_origins") or _base("http.cors_origins", "")
    origins = [o.strip() for o in str(origins_text or "").split(",") if o.strip()] or ["*"]

    try:
        cfg = AppConfig(
            database=DatabaseConfig(url=db_url, auto_apply_migrations=_truthy(auto_migrate)),
            session=SessionConfig(
                secret=str(secret),
                cookie_name=str(cookie_name),
                max_age=int(str(max_age).strip()),
                https_only=_truthy(https_only),
            ),
            security=SecurityConfig(bcrypt_rounds=int(str(rounds).strip())),
            http=HttpConfig(cors_origins=origins),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "SessionConfig",
    "SecurityConfig",
    "HttpConfig",
    "load_config",
]
