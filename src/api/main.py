"""FastAPI application factory."""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import check_rate_limit
from api.errors import register_exception_handlers
from api.middleware import (
    REQUEST_ID_HEADER,
    RateLimitHeadersMiddleware,
    RequestContextMiddleware,
)
from api.routers import bookmarks, health
from core.config import Settings, get_settings
from core.rate_limiter import RateLimiter, build_rate_limiter
from core.redis import RedisClient
from services.bookmark_store import BookmarkStore

logger = logging.getLogger(__name__)

EXPOSED_HEADERS = [
    "X-Total",
    "X-RateLimit-Limit",
    "X-RateLimit-Remaining",
    "X-RateLimit-Reset",
    "Retry-After",
    REQUEST_ID_HEADER,
]


def create_app(
    settings: Settings | None = None,
    store: BookmarkStore | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators that are not passed in are created from settings. The store
    and any Redis client created here are closed when the app shuts down.
    """
    settings = settings or get_settings()
    store = store or BookmarkStore.from_settings(settings)

    redis_client: RedisClient | None = None
    if rate_limiter is None:
        if settings.redis_enabled:
            redis_client = RedisClient(settings.redis_url)
        rate_limiter = build_rate_limiter(settings, redis_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
        if settings.db_create_schema:
            await store.create_schema()
        if redis_client is not None:
            await redis_client.connect()
        logger.info("bookmark service started")
        try:
            yield
        finally:
            await store.close()
            if redis_client is not None:
                await redis_client.close()
            logger.info("bookmark service stopped")

    app = FastAPI(
        title="Bookmarks API",
        description="A bookmark catalog with search, pagination and Netscape export.",
        version="0.1.0",
        lifespan=lifespan,
        dependencies=[Depends(check_rate_limit)],
    )
    app.state.settings = settings
    app.state.store = store
    app.state.rate_limiter = rate_limiter

    app.add_middleware(RateLimitHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(bookmarks.router)
    return app
