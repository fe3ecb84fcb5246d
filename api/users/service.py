"""
User business logic.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from auth import security

from . import repository, schemas

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_DETAIL = "A user with that email already exists."


class DuplicateEmailError(RuntimeError):
    pass


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        name=user_row.get("name"),
        email=str(user_row["email"]),
        created_at=user_row.get("created_at"),
        updated_at=user_row.get("updated_at"),
    )


async def insert_user(*, email: str, password: str, name: str | None = None) -> dict:
    """
    Hash the password and store a new user row.

    Raises `DuplicateEmailError` when the email is already registered,
    either by the pre-check or by the unique index losing a race.
    """
    existing = await repository.get_user_by_email(email)
    if existing is not None:
        raise DuplicateEmailError(DUPLICATE_EMAIL_DETAIL)

    password_hash = security.hash_password(password)
    try:
        row = await repository.create_user(name=name, email=email, password_hash=password_hash)
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateEmailError(DUPLICATE_EMAIL_DETAIL) from exc

    logger.info("user_created id=%s", row["id"])
    return row


async def create_user(payload: schemas.UserCreate) -> schemas.UserResponse:
    try:
        row = await insert_user(email=payload.email, password=payload.password, name=payload.name)
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except security.AuthSecurityError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_response(row)


async def find_users(*, limit: int, offset: int = 0) -> list[schemas.UserResponse]:
    rows = await repository.list_users(limit=limit, offset=offset)
    return [to_user_response(row) for row in rows]


async def find_user_by_id(user_id: int) -> schemas.UserResponse:
    row = await repository.get_user_by_id(user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return to_user_response(row)
