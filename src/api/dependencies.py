"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.rate_limit_config import (
    RateLimitExceededError,
    RateLimitResult,
    endpoint_key,
)
from core.rate_limiter import RateLimiter
from services.bookmark_store import BookmarkStore


def get_store(request: Request) -> BookmarkStore:
    """The store owned by the application."""
    return request.app.state.store


def get_rate_limiter(request: Request) -> RateLimiter:
    """The limiter owned by the application."""
    return request.app.state.rate_limiter


async def check_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> RateLimitResult:
    """
    Dependency that enforces the per-endpoint rate limit.

    The key is the matched route template, so /bookmarks/1 and /bookmarks/2
    share one counter. Stores the result in request.state for
    RateLimitHeadersMiddleware. Raises RateLimitExceededError for 429
    responses (handled by exception handler).
    """
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)

    result = await limiter.check(endpoint_key(request.method, path))
    request.state.rate_limit = result

    if not result.allowed:
        raise RateLimitExceededError(result)
    return result


__all__ = [
    "check_rate_limit",
    "get_rate_limiter",
    "get_store",
]
