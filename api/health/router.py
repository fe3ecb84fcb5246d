"""
Health-check endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter()


@router.get("/api/health")
async def health(init: str | None = Query(default=None)) -> dict:
    # Only the literal "true" opts in to connecting.
    return await service.check(init_requested=(init or "").strip().lower() == "true")
