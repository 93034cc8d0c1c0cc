"""Pydantic request bodies for pipeline, status and user-status routes."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class PipelineIn(BaseModel):
    name: str = Field(min_length=1)


class StatusCreate(BaseModel):
    pipeline_id: int
    name: str = Field(min_length=1)
    # Requested 1-based column position; omitted appends
    order: Optional[int] = None


class StatusUpdate(BaseModel):
    name: str = Field(min_length=1)
    order: Optional[int] = None


class UserStatusCreate(BaseModel):
    user_id: int
    p_s_id: int = Field(validation_alias=AliasChoices("p_s_id", "pipeline_status_id"))


class UserStatusMove(BaseModel):
    pipeline_status_id: int


class UserStatusRemove(BaseModel):
    user_id: int
    pipeline_id: int


__all__ = [
    "PipelineIn",
    "StatusCreate",
    "StatusUpdate",
    "UserStatusCreate",
    "UserStatusMove",
    "UserStatusRemove",
]
