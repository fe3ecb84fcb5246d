"""
Admin/API mount: generic collection endpoints under `/api/admin`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from auth import dependencies as auth_dependencies
from auth import schemas as auth_schemas
from auth import service as auth_service
from users import schemas as user_schemas
from users import service as user_service

from . import service

router = APIRouter(prefix="/api/admin")


@router.get("")
async def index(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    return await service.describe()


@router.post("/users/login")
async def login(payload: auth_schemas.LoginRequest) -> auth_schemas.LoginResponse:
    async with service.forward_errors("log in"):
        return await auth_service.login(payload)


@router.get("/users/me")
async def me(current_user: dict = Depends(auth_dependencies.get_current_user)) -> user_schemas.UserResponse:
    return user_service.to_user_response(current_user)


@router.get("/{collection}")
async def find(
    collection: str,
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
    depth: int = Query(1, ge=0, le=1),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.find(collection, limit=limit, page=page, depth=depth)


@router.get("/{collection}/{doc_id}")
async def find_by_id(
    collection: str,
    doc_id: str,
    depth: int = Query(1, ge=0, le=1),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> Any:
    return await service.find_by_id(collection, doc_id, depth=depth)


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
async def create(
    collection: str,
    data: dict[str, Any] = Body(...),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> Any:
    return await service.create(collection, data)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def not_found(path: str) -> None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route '/api/admin/{path}' not found.")
