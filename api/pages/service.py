"""
Server-rendered home page.
"""

from __future__ import annotations

import logging
from html import escape

from posts import schemas as post_schemas
from posts import service as post_service

logger = logging.getLogger(__name__)

RECENT_POSTS_LIMIT = 10

_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Recent posts</title>
</head>
<body>
<main>
<h1>Recent posts</h1>
<section>
{body}
</section>
</main>
</body>
</html>
"""


def author_label(post: post_schemas.PostResponse) -> str:
    if isinstance(post.author, post_schemas.AuthorResponse):
        return post.author.name or "Unknown"
    if post.author is not None:
        return str(post.author)
    return "Unknown"


def _render_post(post: post_schemas.PostResponse) -> str:
    return (
        f'<li data-post-id="{post.id}">'
        f"<h2>{escape(post.title)}</h2>"
        f"<p>{escape(post.content)}</p>"
        f'<p class="author">Author: {escape(author_label(post))}</p>'
        "</li>"
    )


def render_home(posts: list[post_schemas.PostResponse], *, error: str | None = None) -> str:
    if posts:
        body = "<ul>\n" + "\n".join(_render_post(p) for p in posts) + "\n</ul>"
    elif error:
        body = f'<div class="notice">{escape(error)}</div>'
    else:
        body = '<div class="notice">No posts found.</div>'
    return _PAGE.format(body=body)


async def home_page() -> str:
    try:
        posts = await post_service.find_posts(limit=RECENT_POSTS_LIMIT, depth=1)
    except Exception:
        logger.exception("home_posts_load_failed")
        return render_home([], error="Failed to load posts.")
    return render_home(posts)
