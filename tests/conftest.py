"""Pytest configuration and fixtures.

The repository modules are swapped for an in-memory store and the asyncpg
pool factory for a fake, so the app runs without a database.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from auth import security
from core import db
from posts import repository as post_repository
from users import repository as user_repository

TEST_SECRET = "test-secret-for-signing-access-tokens-0123456789"

_ENV_VARS = (
    "DATABASE_URI",
    "DATABASE_URL",
    "APP_SECRET",
    "SERVER_URL",
    "ADMIN_SETUP_TOKEN",
    "ACCESS_TOKEN_EXPIRE_MIN",
    "JWT_ALG",
)


class FakeStore:
    """In-memory stand-in for the users/posts repositories."""

    def __init__(self):
        self.users = {}
        self.posts = {}
        self._next_id = 1
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _new_id(self):
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def _stamp(self, row_id):
        return self._epoch + timedelta(seconds=row_id)

    # users

    async def create_user(self, *, name, email, password_hash):
        user_id = self._new_id()
        row = {
            "id": user_id,
            "name": name,
            "email": user_repository.normalize_email(email),
            "password_hash": password_hash,
            "created_at": self._stamp(user_id),
            "updated_at": self._stamp(user_id),
        }
        self.users[user_id] = row
        return dict(row)

    async def get_user_by_email(self, email):
        wanted = user_repository.normalize_email(email)
        for row in self.users.values():
            if row["email"] == wanted:
                return dict(row)
        return None

    async def get_user_by_id(self, user_id):
        row = self.users.get(user_id)
        return dict(row) if row is not None else None

    async def list_users(self, *, limit, offset=0):
        rows = sorted(self.users.values(), key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [dict(r) for r in rows[offset:offset + limit]]

    async def count_users(self):
        return len(self.users)

    # posts

    def _joined(self, post):
        row = dict(post)
        author = self.users.get(post["author_id"]) if post["author_id"] is not None else None
        row["author_user_id"] = author["id"] if author else None
        row["author_name"] = author["name"] if author else None
        row["author_email"] = author["email"] if author else None
        return row

    async def insert_post(self, *, title, content, author_id):
        post_id = self._new_id()
        self.posts[post_id] = {
            "id": post_id,
            "title": title,
            "content": content,
            "author_id": author_id,
            "created_at": self._stamp(post_id),
            "updated_at": self._stamp(post_id),
        }
        return self._joined(self.posts[post_id])

    async def list_posts(self, *, limit, offset=0):
        rows = sorted(self.posts.values(), key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [self._joined(r) for r in rows[offset:offset + limit]]

    async def get_post_by_id(self, post_id):
        post = self.posts.get(post_id)
        return self._joined(post) if post is not None else None

    async def count_posts(self):
        return len(self.posts)

    def add_user(self, email, password="secret-password", name=None):
        """Synchronously seed a user with a real bcrypt hash."""
        user_id = self._new_id()
        self.users[user_id] = {
            "id": user_id,
            "name": name,
            "email": user_repository.normalize_email(email),
            "password_hash": security.hash_password(password),
            "created_at": self._stamp(user_id),
            "updated_at": self._stamp(user_id),
        }
        return self.users[user_id]

    def add_post(self, title, content, author_id=None):
        post_id = self._new_id()
        self.posts[post_id] = {
            "id": post_id,
            "title": title,
            "content": content,
            "author_id": author_id,
            "created_at": self._stamp(post_id),
            "updated_at": self._stamp(post_id),
        }
        return self.posts[post_id]


class FakePool:
    def __init__(self, dsn=None, fail_schema=False):
        self.dsn = dsn
        self.fail_schema = fail_schema
        self.executed = []
        self.closed = False
        self.rows = []

    async def execute(self, sql, *args):
        if self.fail_schema:
            raise RuntimeError("schema failed")
        self.executed.append((sql, args))

    async def fetchrow(self, sql, *args):
        return self.rows[0] if self.rows else None

    async def fetch(self, sql, *args):
        return list(self.rows)

    async def fetchval(self, sql, *args):
        return len(self.rows)

    async def close(self):
        self.closed = True


class PoolFactory:
    """Replacement for asyncpg.create_pool that records every call."""

    def __init__(self, fail_schema=False):
        self.fail_schema = fail_schema
        self.calls = 0
        self.pools = []

    async def __call__(self, dsn=None, **kwargs):
        self.calls += 1
        pool = FakePool(dsn=dsn, fail_schema=self.fail_schema)
        self.pools.append(pool)
        return pool


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate every test from the host environment and module state."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_SECRET", TEST_SECRET)
    monkeypatch.setattr(db, "_pool", None)
    monkeypatch.setattr(db, "_initialized_by", None)
    monkeypatch.setattr(db, "_init_lock", None)


@pytest.fixture
def pool_factory(monkeypatch):
    factory = PoolFactory()
    monkeypatch.setattr(db.asyncpg, "create_pool", factory)
    return factory


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    for name in ("create_user", "get_user_by_email", "get_user_by_id", "list_users", "count_users"):
        monkeypatch.setattr(user_repository, name, getattr(fake, name))
    for name in ("insert_post", "list_posts", "get_post_by_id", "count_posts"):
        monkeypatch.setattr(post_repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client():
    from main import app

    return TestClient(app)


@pytest.fixture
def admin_user(store):
    return store.add_user("admin@example.com", password="admin-password", name="Admin")


@pytest.fixture
def auth_headers(admin_user):
    token = security.build_access_token(user_id=admin_user["id"], email=admin_user["email"])
    return {"Authorization": f"Bearer {token}"}
