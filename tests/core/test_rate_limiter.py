"""Tests for the fixed window rate limiters."""
from unittest.mock import AsyncMock, MagicMock

from core.config import Settings
from core.rate_limit_config import RateLimitConfig, RateLimitResult, endpoint_key
from core.rate_limiter import (
    FixedWindowRateLimiter,
    RedisRateLimiter,
    build_rate_limiter,
)
from core.redis import RedisClient


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _redis_client(counts: tuple[int, int, int, int] | None) -> MagicMock:
    client = MagicMock(spec=RedisClient)
    client.fixed_window = AsyncMock(return_value=counts)
    return client


class TestEndpointKey:
    """Tests for endpoint_key."""

    def test__endpoint_key__combines_method_and_template(self) -> None:
        assert endpoint_key("patch", "/bookmarks/{bookmark_id}") == "PATCH:/bookmarks/{bookmark_id}"


class TestFixedWindowRateLimiter:
    """Tests for the in-memory limiter."""

    async def test__check__allows_up_to_limit_then_blocks(self) -> None:
        """The (N+1)th request inside the window is rejected."""
        limiter = FixedWindowRateLimiter(RateLimitConfig(requests=5, window_seconds=1), FakeClock())

        results = [await limiter.check("GET:/bookmarks") for _ in range(6)]

        assert [r.allowed for r in results] == [True] * 5 + [False]
        assert [r.remaining for r in results[:5]] == [4, 3, 2, 1, 0]
        assert results[5].remaining == 0
        assert results[5].retry_after >= 1

    async def test__check__window_reset_allows_again(self) -> None:
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(RateLimitConfig(requests=2, window_seconds=1), clock)
        for _ in range(3):
            await limiter.check("GET:/bookmarks")

        clock.advance(1.0)
        result = await limiter.check("GET:/bookmarks")

        assert result.allowed is True
        assert result.remaining == 1

    async def test__check__still_blocked_before_window_ends(self) -> None:
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(RateLimitConfig(requests=1, window_seconds=10), clock)
        await limiter.check("GET:/bookmarks")

        clock.advance(9.5)
        result = await limiter.check("GET:/bookmarks")

        assert result.allowed is False
        assert result.reset == 1

    async def test__check__endpoints_have_separate_counters(self) -> None:
        limiter = FixedWindowRateLimiter(RateLimitConfig(requests=1, window_seconds=1), FakeClock())

        assert (await limiter.check("GET:/bookmarks")).allowed is True
        assert (await limiter.check("POST:/bookmarks")).allowed is True
        assert (await limiter.check("GET:/bookmarks")).allowed is False

    async def test__reset__clears_counters(self) -> None:
        limiter = FixedWindowRateLimiter(RateLimitConfig(requests=1, window_seconds=60), FakeClock())
        await limiter.check("GET:/health")
        assert (await limiter.check("GET:/health")).allowed is False

        limiter.reset()

        assert (await limiter.check("GET:/health")).allowed is True

    async def test__instances_are_isolated(self) -> None:
        config = RateLimitConfig(requests=1, window_seconds=60)
        first = FixedWindowRateLimiter(config, FakeClock())
        second = FixedWindowRateLimiter(config, FakeClock())
        await first.check("GET:/health")

        assert (await second.check("GET:/health")).allowed is True


class TestRateLimitResultHeaders:
    """Tests for RateLimitResult.headers."""

    def test__headers__allowed_has_no_retry_after(self) -> None:
        result = RateLimitResult(allowed=True, limit=5, remaining=4, reset=1, retry_after=0)

        assert result.headers() == {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "4",
            "X-RateLimit-Reset": "1",
        }

    def test__headers__rejected_includes_retry_after(self) -> None:
        result = RateLimitResult(allowed=False, limit=5, remaining=0, reset=1, retry_after=1)

        assert result.headers()["Retry-After"] == "1"


class TestRedisRateLimiter:
    """Tests for the Redis-backed limiter (Redis client mocked)."""

    async def test__check__allowed_result_from_script(self) -> None:
        client = _redis_client((1, 3, 1, 0))
        limiter = RedisRateLimiter(client, RateLimitConfig(requests=5, window_seconds=1))

        result = await limiter.check("GET:/bookmarks")

        assert result == RateLimitResult(allowed=True, limit=5, remaining=3, reset=1, retry_after=0)
        client.fixed_window.assert_awaited_once_with("rate:endpoint:GET:/bookmarks", 5, 1)

    async def test__check__denied_result_from_script(self) -> None:
        client = _redis_client((0, 0, 1, 1))
        limiter = RedisRateLimiter(client, RateLimitConfig(requests=5, window_seconds=1))

        result = await limiter.check("GET:/bookmarks")

        assert result.allowed is False
        assert result.remaining == 0
        assert result.retry_after == 1

    async def test__check__falls_back_to_local_counters_when_redis_unavailable(self) -> None:
        """Unavailable Redis does not disable limiting."""
        client = _redis_client(None)
        limiter = RedisRateLimiter(client, RateLimitConfig(requests=1, window_seconds=60))

        first = await limiter.check("GET:/bookmarks")
        second = await limiter.check("GET:/bookmarks")

        assert first.allowed is True
        assert second.allowed is False


class TestBuildRateLimiter:
    """Tests for build_rate_limiter."""

    def test__build_rate_limiter__in_memory_by_default(self) -> None:
        settings = Settings(_env_file=None, database_url="sqlite+aiosqlite://")

        limiter = build_rate_limiter(settings)

        assert isinstance(limiter, FixedWindowRateLimiter)
        assert limiter.config == RateLimitConfig(requests=5, window_seconds=1)

    def test__build_rate_limiter__redis_when_enabled(self) -> None:
        settings = Settings(
            _env_file=None, database_url="sqlite+aiosqlite://", redis_enabled=True,
        )

        limiter = build_rate_limiter(settings, RedisClient("redis://localhost:6379"))

        assert isinstance(limiter, RedisRateLimiter)
