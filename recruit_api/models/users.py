"""Pydantic request bodies for registration and login."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RegisterIn(BaseModel):
    username: str = Field(min_length=1, max_length=80)
    # bcrypt reads at most 72 bytes
    password: str = Field(min_length=1, max_length=72)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class LoginIn(BaseModel):
    username: str
    password: str


__all__ = ["RegisterIn", "LoginIn"]
