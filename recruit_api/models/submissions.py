"""Pydantic request bodies for submission routes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class SubmissionIn(BaseModel):
    form_id: int


class AnswerIn(BaseModel):
    question_id: int
    answer: Optional[str] = None


class AnswersIn(BaseModel):
    answers: List[AnswerIn]


__all__ = ["SubmissionIn", "AnswerIn", "AnswersIn"]
