"""Cookie-session helpers.

The session itself is Starlette's signed-cookie ``SessionMiddleware``; these
helpers only read and write the authenticated user id stored in it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from recruit_api.logic.repository_users import get_user

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def login_session(request: Request, user_id: int) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = int(user_id)


def logout_session(request: Request) -> None:
    request.session.clear()


def session_user_id(request: Request) -> int | None:
    raw = request.session.get(SESSION_USER_KEY)
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def require_user(request: Request) -> Dict[str, Any]:
    """FastAPI dependency rejecting requests without an authenticated session.

    Anonymous requests, and sessions pointing at a user that no longer
    exists, receive 403.
    """
    user_id = session_user_id(request)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    try:
        user = get_user(user_id)
    except SQLAlchemyError:
        logger.error("session_user_lookup_failed user_id=%s", user_id, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if user is None:
        logout_session(request)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return user


__all__ = ["require_user", "login_session", "logout_session", "session_user_id", "SESSION_USER_KEY"]
