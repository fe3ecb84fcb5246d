"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.db import MAX_SERIAL_ID
from users import repository as user_repository
from users import service as user_service

from . import schemas, security

logger = logging.getLogger(__name__)


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user_row = await user_repository.get_user_by_email(payload.email)
    is_valid = user_row is not None and security.verify_password(
        payload.password,
        str(user_row.get("password_hash") or ""),
    )
    if not is_valid:
        logger.info("login_failed email=%s", user_repository.normalize_email(payload.email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    access_token = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
    )
    return schemas.LoginResponse(
        user=user_service.to_user_response(user_row),
        access_token=access_token,
        expires_in=security.access_token_ttl_s(),
    )


async def get_user_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    subject = str(payload.get("sub") or "").strip()
    if not (subject.isascii() and subject.isdigit()) or int(subject) > MAX_SERIAL_ID:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    try:
        user_row = await user_repository.get_user_by_id(int(subject))
    except Exception as exc:
        logger.exception("token_user_lookup_failed sub=%s", subject)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load user: {exc}",
        ) from exc
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    return user_row
