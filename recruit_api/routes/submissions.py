"""Submission endpoints.

A submission is created on a user's first visit to a form and reused after
that; answers are saved against it one question at a time or in bulk.
Submissions are private to their owner: another user's id reads as 404.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from recruit_api.http.problem import problem
from recruit_api.logic import repository_submissions as repo
from recruit_api.models.submissions import AnswersIn, SubmissionIn
from recruit_api.security.session import require_user

router = APIRouter(prefix="/submission")
logger = logging.getLogger(__name__)


@router.post("", summary="Create or fetch the caller's submission for a form")
def create_or_get_submission(payload: SubmissionIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        return repo.create_or_get_submission(payload.form_id, user["id"])
    except IntegrityError:
        logger.warning("submission_rejected form_id=%s user_id=%s", payload.form_id, user["id"], exc_info=True)
        return problem(400)
    except SQLAlchemyError:
        logger.error("Error in POST on submission for form %s", payload.form_id, exc_info=True)
        return problem(500)


@router.get("/{submission_id}", summary="Fetch a submission with its answers")
def get_submission(submission_id: int, user: Dict[str, Any] = Depends(require_user)):
    try:
        submission = repo.get_submission(submission_id, user["id"])
    except SQLAlchemyError:
        logger.error("Error fetching submission %s", submission_id, exc_info=True)
        return problem(500)
    if submission is None:
        return problem(404, "Submission not found")
    return submission


@router.put("/{submission_id}/answers", summary="Save answers for a submission")
def save_answers(submission_id: int, payload: AnswersIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        written = repo.save_answers(submission_id, user["id"], [a.model_dump() for a in payload.answers])
    except SQLAlchemyError:
        logger.error("Error saving answers for submission %s", submission_id, exc_info=True)
        return problem(500)
    if written is None:
        return problem(404, "Submission not found")
    logger.info("answers_saved submission_id=%s written=%d", submission_id, written)
    return {"id": submission_id, "written": written}


__all__ = ["router"]
