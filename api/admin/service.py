"""
Collection dispatch for the admin mount.

Maps a collection slug onto the users/posts services so the router can
stay generic. Failures other than `HTTPException` are logged and turned
into a 500 that carries the underlying message.
"""

from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import HTTPException, status
from pydantic import BaseModel, ValidationError

from core import collections
from core.db import MAX_SERIAL_ID
from core.errors import describe_validation_errors
from posts import repository as post_repository
from posts import schemas as post_schemas
from posts import service as post_service
from users import repository as user_repository
from users import schemas as user_schemas
from users import service as user_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def forward_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("admin_request_failed action=%r", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {exc}",
        ) from exc


def require_collection(slug: str) -> collections.CollectionConfig:
    config = collections.get_collection(slug)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Collection '{slug}' not found.",
        )
    return config


def parse_doc_id(config: collections.CollectionConfig, raw_id: str) -> int:
    # Anything that cannot be a stored id is simply not found.
    raw_id = (raw_id or "").strip()
    if raw_id.isascii() and raw_id.isdigit() and 1 <= int(raw_id) <= MAX_SERIAL_ID:
        return int(raw_id)
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Document '{raw_id}' not found in '{config.slug}'.",
    )


async def _count(slug: str) -> int:
    if slug == "users":
        return await user_repository.count_users()
    return await post_repository.count_posts()


async def describe() -> dict:
    result = []
    async with forward_errors("describe collections"):
        for config in collections.list_collections():
            item = config.model_dump()
            item["total_docs"] = await _count(config.slug)
            result.append(item)
    return {"collections": result}


async def find(slug: str, *, limit: int, page: int, depth: int) -> dict:
    config = require_collection(slug)
    offset = (page - 1) * limit

    docs: list[BaseModel]
    async with forward_errors(f"list {config.slug}"):
        if config.slug == "users":
            docs = await user_service.find_users(limit=limit, offset=offset)
        else:
            docs = await post_service.find_posts(limit=limit, page=page, depth=depth)
        total_docs = await _count(config.slug)

    total_pages = max(1, math.ceil(total_docs / limit))
    return {
        "docs": docs,
        "total_docs": total_docs,
        "limit": limit,
        "page": page,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
    }


async def find_by_id(slug: str, raw_id: str, *, depth: int) -> BaseModel:
    config = require_collection(slug)
    doc_id = parse_doc_id(config, raw_id)
    async with forward_errors(f"load {config.slug} {doc_id}"):
        if config.slug == "users":
            return await user_service.find_user_by_id(doc_id)
        return await post_service.find_post_by_id(doc_id, depth=depth)


def _validate(model: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {model.__name__} data: {describe_validation_errors(exc.errors())}",
        ) from exc


async def create(slug: str, data: dict[str, Any]) -> BaseModel:
    config = require_collection(slug)
    if config.slug == "users":
        payload = _validate(user_schemas.UserCreate, data)
        async with forward_errors("create users"):
            return await user_service.create_user(payload)

    payload = _validate(post_schemas.PostCreate, data)
    async with forward_errors("create posts"):
        return await post_service.create_post(payload)
