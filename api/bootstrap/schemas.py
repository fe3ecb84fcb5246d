"""
Request/response models for the admin bootstrap endpoints.

Request fields are all optional so missing values surface as the
endpoint's own 400 rather than a validation error.
"""

from __future__ import annotations

from pydantic import BaseModel


class CreateAdminRequest(BaseModel):
    token: str | None = None
    email: str | None = None
    password: str | None = None
    name: str | None = None


class CreateAdminResponse(BaseModel):
    ok: bool = True
    id: int
    message: str | None = None


class UnsafeCreateAdminResponse(BaseModel):
    ok: bool = True
    id: int
    email: str
