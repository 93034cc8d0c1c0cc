from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from recruit_api.config import load_config
from recruit_api.db.base import get_engine
from recruit_api.db.migrations_runner import apply_migrations
from recruit_api.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from recruit_api.http.request_id import RequestIdMiddleware
from recruit_api.logging_setup import configure_logging
from recruit_api.middleware.cors import apply_cors
from recruit_api.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> dict:
    try:
        with get_engine().connect() as conn:
            conn.execute(sql_text("SELECT 1")).fetchone()
        return {"status": "ok", "db": True}
    except SQLAlchemyError:
        logger.error("Health DB check failed", exc_info=True)
        return {"status": "degraded", "db": False}


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    cfg = load_config()

    app = FastAPI(title="Recruit API")
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.session.secret,
        session_cookie=cfg.session.cookie_name,
        max_age=cfg.session.max_age,
        https_only=cfg.session.https_only,
    )
    apply_cors(app, origins=cfg.http.cors_origins)
    # Added last so it wraps every other layer and stamps all log lines
    app.add_middleware(RequestIdMiddleware)

    # Apply migrations on startup to avoid import-time side effects
    @app.on_event("startup")
    def _apply_migrations() -> None:
        if not cfg.database.auto_apply_migrations:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(get_engine())
        except SQLAlchemyError:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup_migrations_applied count=%d", len(applied))

    app.include_router(api_router, prefix="/api")

    # Health endpoint (out of prefix for simplicity in local runs)
    @app.get("/health")
    def health():
        return _health_check()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
# Run with: uvicorn --factory recruit_api.main:create_app
