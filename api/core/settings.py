"""
Environment-driven settings.

Values are read on every call so tests and reloads always see the current
environment. Connection strings and secrets are never returned in any
diagnostic output, only their presence.
"""

from __future__ import annotations

import logging
import os
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

DEFAULT_APP_SECRET = "default_secret"

logger = logging.getLogger(__name__)

_warned_default_secret = False


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def chosen_database_env() -> str | None:
    # DATABASE_URI wins when both are present.
    if _env("DATABASE_URI"):
        return "DATABASE_URI"
    if _env("DATABASE_URL"):
        return "DATABASE_URL"
    return None


def database_url() -> str:
    name = chosen_database_env()
    if name is None:
        raise RuntimeError("DATABASE_URI or DATABASE_URL is not set.")
    return _sanitize_database_url(_env(name))


def env_presence() -> dict:
    return {
        "DATABASE_URI_present": bool(_env("DATABASE_URI")),
        "DATABASE_URL_present": bool(_env("DATABASE_URL")),
        "chosen_db_env": chosen_database_env(),
        "APP_SECRET_present": bool(_env("APP_SECRET")),
    }


def app_secret() -> str:
    global _warned_default_secret
    secret = _env("APP_SECRET")
    if secret:
        return secret
    if not _warned_default_secret:
        logger.warning("app_secret_missing using_default=true")
        _warned_default_secret = True
    return DEFAULT_APP_SECRET


def server_url() -> str | None:
    return _env("SERVER_URL").rstrip("/") or None


def admin_setup_token() -> str | None:
    return _env("ADMIN_SETUP_TOKEN") or None


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 120)


def jwt_algorithm() -> str:
    return _env("JWT_ALG") or "HS256"


def log_level() -> str:
    return (_env("LOG_LEVEL") or "INFO").upper()


def port() -> int:
    return _env_int("PORT", 8000)
