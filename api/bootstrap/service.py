"""
Admin-user bootstrap logic.

Two flavours:
- `create_admin`: gated by ADMIN_SETUP_TOKEN, intended as a one-off.
- `unsafe_create_admin`: no protection at all, for local development.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from auth import security
from core import settings
from core.errors import describe_validation_errors
from users import repository as user_repository
from users import service as user_service

from . import schemas

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "admin"
DEFAULT_ADMIN_NAME = "Admin"


def check_setup_token(provided_token: str | None) -> None:
    expected_token = settings.admin_setup_token()
    if not expected_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="ADMIN_SETUP_TOKEN is not configured on the server.",
        )
    if not security.tokens_match(provided_token, expected_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized (invalid token).",
        )


def _body_token(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    token = body.get("token")
    if not isinstance(token, str):
        return None
    return token.strip() or None


def parse_request(body: Any) -> schemas.CreateAdminRequest:
    if body is None:
        return schemas.CreateAdminRequest()
    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a JSON object.",
        )
    try:
        return schemas.CreateAdminRequest.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid request: {describe_validation_errors(exc.errors())}",
        ) from exc


async def create_admin(
    body: Any,
    *,
    header_token: str | None = None,
) -> schemas.CreateAdminResponse:
    # Header wins over the body token.
    check_setup_token(header_token or _body_token(body))
    payload = parse_request(body)

    email = (payload.email or "").strip()
    password = payload.password or ""
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: `email` and `password` are required.",
        )

    try:
        row = await user_service.insert_user(
            email=email,
            password=password,
            name=payload.name or DEFAULT_ADMIN_NAME,
        )
    except user_service.DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except security.AuthSecurityError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("create_admin_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create admin user: {exc}",
        ) from exc

    logger.info("admin_created id=%s", row["id"])
    return schemas.CreateAdminResponse(
        id=int(row["id"]),
        message="Admin user created. Remove or disable this endpoint after use.",
    )


async def unsafe_create_admin(body: Any) -> tuple[schemas.UnsafeCreateAdminResponse, bool]:
    """
    Create (or find) an admin user without any protection.

    Returns the response and whether a new user was created.
    """
    payload = parse_request(body)
    email = (payload.email or "").strip() or DEFAULT_ADMIN_EMAIL
    password = payload.password or DEFAULT_ADMIN_PASSWORD
    name = payload.name or DEFAULT_ADMIN_NAME

    logger.warning("unsafe_create_admin_called email=%s", user_repository.normalize_email(email))

    try:
        existing = await user_repository.get_user_by_email(email)
        if existing is not None:
            return schemas.UnsafeCreateAdminResponse(id=int(existing["id"]), email=email), False

        row = await user_service.insert_user(email=email, password=password, name=name)
    except security.AuthSecurityError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("unsafe_create_admin_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return schemas.UnsafeCreateAdminResponse(id=int(row["id"]), email=email), True
