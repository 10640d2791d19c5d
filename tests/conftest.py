"""Shared fixtures: a SQLite-backed store and an httpx client over the app."""
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from api.main import create_app
from core.config import Settings
from core.rate_limit_config import RateLimitConfig
from core.rate_limiter import FixedWindowRateLimiter
from services.bookmark_store import BookmarkStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bookmarks.db'}",
    )


@pytest.fixture
async def store(settings: Settings) -> AsyncGenerator[BookmarkStore, None]:
    """A store with the schema created."""
    store = BookmarkStore.from_settings(settings)
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def rate_limiter() -> FixedWindowRateLimiter:
    """Limiter generous enough that ordinary API tests never hit it."""
    return FixedWindowRateLimiter(RateLimitConfig(requests=10_000, window_seconds=60))


@pytest.fixture
async def client(
    settings: Settings,
    store: BookmarkStore,
    rate_limiter: FixedWindowRateLimiter,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process."""
    app = create_app(settings=settings, store=store, rate_limiter=rate_limiter)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
