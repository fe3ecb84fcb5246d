"""
Error translation shared by the routers.

Request validation failures are reported as 400 with a readable
message instead of FastAPI's default 422 body.
"""

from __future__ import annotations

from typing import Any, Iterable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


def describe_validation_errors(errors: Iterable[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        # FastAPI prefixes locations with "body"/"query"/"path"; keep them for context.
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Invalid request: {describe_validation_errors(exc.errors())}"},
    )
