"""
Record type registry.

Describes the stored collections the way the admin mount exposes them:
a slug, whether the collection holds login-capable users, and its fields.
"""

from __future__ import annotations

from pydantic import BaseModel


class FieldConfig(BaseModel):
    name: str
    type: str
    required: bool = False
    relation_to: str | None = None


class CollectionConfig(BaseModel):
    slug: str
    auth: bool = False
    fields: list[FieldConfig]


USERS = CollectionConfig(
    slug="users",
    auth=True,
    fields=[
        FieldConfig(name="name", type="text"),
        FieldConfig(name="email", type="email", required=True),
    ],
)

POSTS = CollectionConfig(
    slug="posts",
    fields=[
        FieldConfig(name="title", type="text", required=True),
        FieldConfig(name="content", type="textarea", required=True),
        FieldConfig(name="author", type="relationship", relation_to="users"),
    ],
)

_COLLECTIONS: dict[str, CollectionConfig] = {c.slug: c for c in (USERS, POSTS)}


def get_collection(slug: str) -> CollectionConfig | None:
    return _COLLECTIONS.get((slug or "").strip().lower())


def list_collections() -> list[CollectionConfig]:
    return list(_COLLECTIONS.values())
