"""
Admin bootstrap endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post("/create-admin", status_code=status.HTTP_201_CREATED)
async def create_admin(
    # Raw JSON: the token is checked before the body is validated.
    body: Any = Body(default=None),
    header_token: str | None = Depends(auth_dependencies.get_setup_token_header),
) -> schemas.CreateAdminResponse:
    return await service.create_admin(body, header_token=header_token)


@router.api_route("/unsafe-create-admin", methods=["GET", "POST"])
async def unsafe_create_admin(
    request: Request,
    response: Response,
    body: Any = Body(default=None),
) -> schemas.UnsafeCreateAdminResponse:
    """
    UNSAFE, development only: creates an admin user without any protection.

    GET always uses the default credentials; POST may override them.
    """
    if request.method != "POST":
        body = None
    result, created = await service.unsafe_create_admin(body)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return result
