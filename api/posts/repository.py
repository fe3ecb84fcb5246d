"""
Post persistence (raw SQL).

Reads always join the author so the service can decide whether to
populate the relation.
"""

from __future__ import annotations

from core import db

_SELECT_POSTS = """
SELECT p.id, p.title, p.content, p.author_id, p.created_at, p.updated_at,
       u.id AS author_user_id, u.name AS author_name, u.email AS author_email
FROM posts p
LEFT JOIN users u ON u.id = p.author_id
"""


async def insert_post(*, title: str, content: str, author_id: int | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO posts (title, content, author_id)
        VALUES ($1, $2, $3)
        RETURNING id
        """,
        title,
        content,
        author_id,
    )
    if row is None:
        raise RuntimeError("Failed to create post.")
    created = await get_post_by_id(int(row["id"]))
    if created is None:
        raise RuntimeError("Failed to read back created post.")
    return created


async def list_posts(*, limit: int, offset: int = 0) -> list[dict]:
    return await db.fetch_all(
        _SELECT_POSTS
        + """
        ORDER BY p.created_at DESC, p.id DESC
        LIMIT $1 OFFSET $2
        """,
        limit,
        offset,
    )


async def get_post_by_id(post_id: int) -> dict | None:
    return await db.fetch_one(
        _SELECT_POSTS + "WHERE p.id = $1",
        post_id,
    )


async def count_posts() -> int:
    return int(await db.fetch_val("SELECT count(*) FROM posts") or 0)
