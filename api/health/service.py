"""
Health check for the lazily initialized database pool.

Never echoes connection strings or secrets, only whether they are set.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core import db, settings

logger = logging.getLogger(__name__)

HEALTH_CHECK_INITIALIZER = "health-check"


async def check(*, init_requested: bool) -> dict:
    env = settings.env_presence()

    if db.is_initialized():
        return {
            "ok": True,
            "initialized": True,
            "initialized_by": db.initialized_by(),
            "env": env,
            "message": "Database already initialized in this process.",
        }

    if not init_requested:
        return {
            "ok": True,
            "initialized": False,
            "initialized_by": None,
            "env": env,
            "message": (
                "Database is not initialized in this process. "
                "Add ?init=true to attempt initialization (this will connect to the DB)."
            ),
        }

    try:
        await db.ensure_pool(initialized_by=HEALTH_CHECK_INITIALIZER)
    except Exception as exc:
        logger.exception("health_init_failed chosen_env=%s", env["chosen_db_env"])
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to initialize database: {exc}",
        ) from exc

    return {
        "ok": True,
        "initialized": True,
        "initialized_by": db.initialized_by(),
        "env": env,
        "message": "Database initialized successfully by the health-check.",
    }
