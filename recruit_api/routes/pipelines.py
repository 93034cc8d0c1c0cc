"""Pipeline, Kanban column and card placement endpoints.

Reads are public; every write requires a session. Data-access failures are
logged and surface as a bare 500 (400 for pipeline creation).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from recruit_api.http.problem import problem
from recruit_api.logic import repository_pipelines as repo
from recruit_api.models.pipelines import (
    PipelineIn,
    StatusCreate,
    StatusUpdate,
    UserStatusCreate,
    UserStatusMove,
    UserStatusRemove,
)
from recruit_api.security.session import require_user

router = APIRouter(prefix="/pipeline")
logger = logging.getLogger(__name__)


@router.get("", summary="List pipeline names")
def list_pipelines():
    try:
        return repo.list_pipelines()
    except SQLAlchemyError:
        logger.error("Error fetching list of pipelines", exc_info=True)
        return problem(500)


@router.post("", status_code=201, summary="Create a pipeline")
def create_pipeline(payload: PipelineIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        pipeline_id = repo.create_pipeline(payload.name)
    except SQLAlchemyError:
        logger.error("error in POST on pipeline", exc_info=True)
        return problem(400)
    logger.info("pipeline_created id=%s by=%s", pipeline_id, user["id"])
    return JSONResponse({"id": pipeline_id, "name": payload.name}, status_code=201)


# Column routes are declared before "/{pipeline_id}" routes so "status" is
# never parsed as a pipeline id.

@router.post("/status", status_code=201, summary="Create a pipeline status (Kanban column)")
def create_status(payload: StatusCreate, user: Dict[str, Any] = Depends(require_user)):
    try:
        status_id = repo.create_status(payload.pipeline_id, payload.order, payload.name)
    except SQLAlchemyError:
        logger.error("error in POST on pipeline status", exc_info=True)
        return problem(500)
    logger.info("pipeline_status_created id=%s pipeline_id=%s", status_id, payload.pipeline_id)
    return JSONResponse({"id": status_id}, status_code=201)


@router.put("/status/{status_id}", summary="Rename or reposition a pipeline status")
def update_status(status_id: int, payload: StatusUpdate, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.update_status(status_id, payload.order, payload.name)
    except SQLAlchemyError:
        logger.error("Error updating pipeline status %s", status_id, exc_info=True)
        return problem(500)
    logger.info("pipeline_status_updated id=%s", status_id)
    return Response(status_code=200)


@router.delete("/status/{status_id}", status_code=204, summary="Delete a pipeline status")
def delete_status(status_id: int, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.delete_status(status_id)
    except SQLAlchemyError:
        logger.error("Error deleting pipeline status %s", status_id, exc_info=True)
        return problem(500)
    logger.info("pipeline_status_deleted id=%s", status_id)
    return Response(status_code=204)


@router.post("/user_status", status_code=201, summary="Place a user in a pipeline status")
def assign_user(payload: UserStatusCreate, user: Dict[str, Any] = Depends(require_user)):
    try:
        row_id = repo.assign_user(payload.user_id, payload.p_s_id)
    except SQLAlchemyError:
        logger.error("Error creating user status for User ID %s", payload.user_id, exc_info=True)
        return problem(500)
    logger.info("user_status_created user_id=%s pipeline_status_id=%s", payload.user_id, payload.p_s_id)
    return JSONResponse({"id": row_id}, status_code=201)


@router.put("/user_status/remove", status_code=204, summary="Remove a user from a pipeline")
def remove_user_status(payload: UserStatusRemove, user: Dict[str, Any] = Depends(require_user)):
    try:
        removed = repo.remove_user_status(payload.user_id, payload.pipeline_id)
    except SQLAlchemyError:
        logger.error("Error deleting user status for User ID %s", payload.user_id, exc_info=True)
        return problem(500)
    logger.info("user_status_removed user_id=%s pipeline_id=%s rows=%d", payload.user_id, payload.pipeline_id, removed)
    return Response(status_code=204)


@router.put("/user_status/{user_id}", summary="Move a user to another pipeline status")
def move_user(user_id: int, payload: UserStatusMove, user: Dict[str, Any] = Depends(require_user)):
    try:
        moved = repo.move_user(user_id, payload.pipeline_status_id)
    except SQLAlchemyError:
        logger.error("Error updating user status for User ID %s", user_id, exc_info=True)
        return problem(500)
    logger.info("user_moved user_id=%s pipeline_status_id=%s rows=%d", user_id, payload.pipeline_status_id, moved)
    return Response(status_code=200)


@router.get("/{pipeline_id}", summary="Flat Kanban rows for a pipeline")
def get_pipeline_detail(pipeline_id: int):
    try:
        return repo.get_pipeline_detail(pipeline_id)
    except SQLAlchemyError:
        logger.error("Error fetching Kanban data for pipeline %s", pipeline_id, exc_info=True)
        return problem(500)


@router.get("/{pipeline_id}/status", summary="Columns of a pipeline in order")
def list_statuses(pipeline_id: int):
    try:
        return repo.list_statuses(pipeline_id)
    except SQLAlchemyError:
        logger.error("Error fetching statuses for pipeline %s", pipeline_id, exc_info=True)
        return problem(500)


@router.put("/{pipeline_id}", summary="Rename a pipeline")
def rename_pipeline(pipeline_id: int, payload: PipelineIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.rename_pipeline(pipeline_id, payload.name)
    except SQLAlchemyError:
        logger.error("Error updating pipeline name for ID %s", pipeline_id, exc_info=True)
        return problem(500)
    logger.info("pipeline_renamed id=%s", pipeline_id)
    return Response(status_code=200)


@router.delete("/{pipeline_id}", status_code=204, summary="Delete a pipeline")
def delete_pipeline(pipeline_id: int, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.delete_pipeline(pipeline_id)
    except SQLAlchemyError:
        logger.error("Error deleting pipeline %s", pipeline_id, exc_info=True)
        return problem(500)
    logger.info("pipeline_deleted id=%s", pipeline_id)
    return Response(status_code=204)


__all__ = ["router"]
