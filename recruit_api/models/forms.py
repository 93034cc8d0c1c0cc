"""Pydantic request bodies for the form builder.

The ``*Node`` models mirror the nested document served by
``GET /form/{id}/all``; a client edits that document and sends it back under
``NewForm``. Rows without an ``id`` are new. The ``type`` markers and any
other extra keys are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FormIn(BaseModel):
    name: str = Field(min_length=1)


class SectionIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    order: Optional[int] = None


class QuestionIn(BaseModel):
    question: str = Field(min_length=1)
    description: Optional[str] = None
    order: Optional[int] = None
    answer_type: str = "short answer"
    multiple_choice_answers: List[str] = Field(default_factory=list)


class ChoiceNode(BaseModel):
    id: Optional[int] = None
    answer: str


class QuestionNode(BaseModel):
    id: Optional[int] = None
    question: str = Field(min_length=1)
    description: Optional[str] = None
    order: Optional[int] = None
    answer_type: str = "short answer"
    multiple_choice_answers: Optional[List[ChoiceNode]] = None


class SectionNode(BaseModel):
    id: Optional[int] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    order: Optional[int] = None
    questions: Optional[List[QuestionNode]] = None


class FormNode(BaseModel):
    id: Optional[int] = None
    name: str = Field(min_length=1)
    sections: Optional[List[SectionNode]] = None


class FormEditIn(BaseModel):
    # The stored document is the diff baseline; a client-sent OldForm is ignored.
    NewForm: FormNode


__all__ = [
    "FormIn",
    "SectionIn",
    "QuestionIn",
    "ChoiceNode",
    "QuestionNode",
    "SectionNode",
    "FormNode",
    "FormEditIn",
]
