"""
Post business logic.

`depth` follows the admin API convention: 0 leaves `author` as the raw
user id, 1 populates it with the referenced user.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from users import repository as user_repository

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def _author(row: dict, depth: int) -> schemas.AuthorResponse | int | None:
    author_id = row.get("author_id")
    if author_id is None:
        return None
    if depth <= 0:
        return int(author_id)
    # Dangling reference: the join found no user.
    if row.get("author_user_id") is None:
        return None
    return schemas.AuthorResponse(
        id=int(row["author_user_id"]),
        name=row.get("author_name"),
        email=row.get("author_email"),
    )


def to_post_response(row: dict, *, depth: int = 1) -> schemas.PostResponse:
    return schemas.PostResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        content=str(row["content"]),
        author=_author(row, depth),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def find_posts(*, limit: int = DEFAULT_LIMIT, page: int = 1, depth: int = 1) -> list[schemas.PostResponse]:
    limit = max(1, limit)
    offset = (max(1, page) - 1) * limit
    rows = await repository.list_posts(limit=limit, offset=offset)
    return [to_post_response(row, depth=depth) for row in rows]


async def find_post_by_id(post_id: int, *, depth: int = 1) -> schemas.PostResponse:
    row = await repository.get_post_by_id(post_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
    return to_post_response(row, depth=depth)


async def create_post(payload: schemas.PostCreate) -> schemas.PostResponse:
    if payload.author is not None:
        author = await user_repository.get_user_by_id(payload.author)
        if author is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Author {payload.author} does not exist.",
            )

    row = await repository.insert_post(
        title=payload.title.strip(),
        content=payload.content,
        author_id=payload.author,
    )
    logger.info("post_created id=%s author_id=%s", row["id"], payload.author)
    return to_post_response(row, depth=1)
