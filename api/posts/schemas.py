"""
Post record schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from core.db import MAX_SERIAL_ID


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    # Author user id; optional, but must exist when given.
    author: int | None = Field(default=None, ge=1, le=MAX_SERIAL_ID)

    @field_validator("title", "content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class AuthorResponse(BaseModel):
    id: int
    name: str | None = None
    email: str | None = None


class PostResponse(BaseModel):
    id: int
    title: str
    content: str
    # depth=0 -> author id, depth>=1 -> populated author object.
    author: AuthorResponse | int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
