"""Registration, login and user lookup endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from recruit_api.http.problem import problem
from recruit_api.logic import repository_users as repo
from recruit_api.models.users import LoginIn, RegisterIn
from recruit_api.security.passwords import hash_password, verify_password
from recruit_api.security.session import login_session, logout_session, require_user

router = APIRouter(prefix="/user")
logger = logging.getLogger(__name__)


@router.get("", summary="Current user")
def current_user(user: Dict[str, Any] = Depends(require_user)):
    return user


@router.post("/register", status_code=201, summary="Register a new user")
def register(payload: RegisterIn):
    try:
        digest = hash_password(payload.password)
    except ValueError:
        return problem(400)
    try:
        user_id = repo.create_user(
            payload.username,
            digest,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
        )
    except IntegrityError:
        logger.info("registration_rejected username_taken")
        return problem(409, "Username already taken")
    except SQLAlchemyError:
        logger.error("User registration failed", exc_info=True)
        return problem(500)
    logger.info("user_registered id=%s", user_id)
    return JSONResponse({"id": user_id, "username": payload.username}, status_code=201)


@router.post("/login", summary="Start a session")
def login(payload: LoginIn, request: Request):
    try:
        creds = repo.get_credentials(payload.username)
    except SQLAlchemyError:
        logger.error("Login lookup failed", exc_info=True)
        return problem(500)
    if creds is None or not verify_password(payload.password, creds["password"]):
        logger.info("login_failed")
        return problem(401)
    login_session(request, creds["id"])
    logger.info("login_succeeded user_id=%s", creds["id"])
    return {"id": creds["id"], "username": creds["username"]}


@router.post("/logout", summary="End the session")
def logout(request: Request):
    logout_session(request)
    return {"status": "ok"}


@router.get("/search", summary="Find users by name, username or email")
def search_users(term: str = "", user: Dict[str, Any] = Depends(require_user)):
    try:
        return repo.search_users(term)
    except SQLAlchemyError:
        logger.error("User search failed", exc_info=True)
        return problem(500)


__all__ = ["router"]
