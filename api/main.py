from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from admin import router as admin_router
from bootstrap import router as bootstrap_router
from core import db, settings
from core.errors import request_validation_handler
from core.log_config import configure_logging
from health import router as health_router
from pages import router as pages_router

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # The pool is created lazily on first use; only tear it down here.
    try:
        yield
    finally:
        await db.close_pool()


def cors_origins() -> list[str]:
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    public_url = settings.server_url()
    if public_url and public_url not in origins:
        origins.append(public_url)
    return origins


app = FastAPI(title="blog-demo", lifespan=lifespan)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pages_router.router, tags=["pages"])
app.include_router(health_router.router, tags=["health"])
app.include_router(bootstrap_router.router, tags=["bootstrap"])
app.include_router(admin_router.router, tags=["admin"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port())
