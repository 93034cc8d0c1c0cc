"""Form builder endpoints: forms, sections, questions and whole-form edits."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from recruit_api.http.problem import problem
from recruit_api.logic import form_diff
from recruit_api.logic import repository_forms as repo
from recruit_api.models.forms import FormEditIn, FormIn, QuestionIn, SectionIn
from recruit_api.security.session import require_user

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/form", summary="List forms")
def list_forms():
    try:
        return repo.list_forms()
    except SQLAlchemyError:
        logger.error("Error fetching forms", exc_info=True)
        return problem(500)


@router.post("/form", status_code=201, summary="Create an empty form")
def create_form(payload: FormIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        form_id = repo.create_form(payload.name)
    except SQLAlchemyError:
        logger.error("Error creating form", exc_info=True)
        return problem(500)
    logger.info("form_created id=%s by=%s", form_id, user["id"])
    return JSONResponse({"id": form_id, "name": payload.name}, status_code=201)


@router.get("/form/{form_id}/all", summary="Nested form document")
def get_form_with_sections(form_id: int):
    try:
        tree = repo.get_form_with_sections(form_id)
    except SQLAlchemyError:
        logger.error("Error fetching form %s with sections", form_id, exc_info=True)
        return problem(500)
    if tree is None:
        return problem(404, "Form not found")
    return tree


@router.get("/form/{form_id}/sections", summary="Sections of a form in order")
def list_sections(form_id: int):
    try:
        return repo.list_sections(form_id)
    except SQLAlchemyError:
        logger.error("Error fetching sections for form %s", form_id, exc_info=True)
        return problem(500)


@router.post("/form/{form_id}/sections", status_code=201, summary="Add a section to a form")
def create_section(form_id: int, payload: SectionIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        section_id = repo.create_section(form_id, payload.name, payload.description, payload.order)
    except IntegrityError:
        logger.warning("section_rejected form_id=%s", form_id, exc_info=True)
        return problem(400)
    except SQLAlchemyError:
        logger.error("Error creating section for form %s", form_id, exc_info=True)
        return problem(500)
    logger.info("section_created id=%s form_id=%s", section_id, form_id)
    return JSONResponse({"id": section_id}, status_code=201)


@router.put("/form/{form_id}/name", summary="Rename a form")
def rename_form(form_id: int, payload: FormIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.rename_form(form_id, payload.name)
    except SQLAlchemyError:
        logger.error("Error renaming form %s", form_id, exc_info=True)
        return problem(500)
    logger.info("form_renamed id=%s", form_id)
    return Response(status_code=200)


@router.put("/form/{form_id}", summary="Reconcile a form with an edited document")
def edit_form(form_id: int, payload: FormEditIn, user: Dict[str, Any] = Depends(require_user)):
    try:
        current = repo.get_form_with_sections(form_id)
        if current is None:
            return problem(404, "Form not found")
        ops = form_diff.plan_form_edit(current, payload.NewForm.model_dump())
        summary = form_diff.apply_form_edit(form_id, ops)
    except (IntegrityError, ValueError, KeyError):
        logger.warning("form_edit_rejected form_id=%s", form_id, exc_info=True)
        return problem(400)
    except SQLAlchemyError:
        logger.error("Error editing form %s", form_id, exc_info=True)
        return problem(500)
    return summary


@router.delete("/form/{form_id}", status_code=204, summary="Delete a form")
def delete_form(form_id: int, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.delete_form(form_id)
    except SQLAlchemyError:
        logger.error("Error deleting form %s", form_id, exc_info=True)
        return problem(500)
    logger.info("form_deleted id=%s", form_id)
    return Response(status_code=204)


@router.post("/section/{section_id}/questions", status_code=201, summary="Add a question to a section")
def create_question(section_id: int, payload: QuestionIn, user: Dict[str, Any] = Depends(require_user)):
    values = payload.model_dump(exclude={"multiple_choice_answers"})
    try:
        question_id = repo.create_question(section_id, values, payload.multiple_choice_answers)
    except IntegrityError:
        logger.warning("question_rejected section_id=%s", section_id, exc_info=True)
        return problem(400)
    except SQLAlchemyError:
        logger.error("Error creating question for section %s", section_id, exc_info=True)
        return problem(500)
    logger.info("question_created id=%s section_id=%s", question_id, section_id)
    return JSONResponse({"id": question_id}, status_code=201)


@router.put("/question/{question_id}/archive", summary="Archive a question")
def archive_question(question_id: int, user: Dict[str, Any] = Depends(require_user)):
    try:
        repo.archive_question(question_id)
    except SQLAlchemyError:
        logger.error("Error archiving question %s", question_id, exc_info=True)
        return problem(500)
    logger.info("question_archived id=%s", question_id)
    return Response(status_code=200)


__all__ = ["router"]
