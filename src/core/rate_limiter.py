"""Fixed window rate limiters keyed by endpoint."""
import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from core.config import Settings
from core.rate_limit_config import RateLimitConfig, RateLimitResult
from core.redis import RedisClient

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Admission check shared by the in-memory and Redis limiters."""

    async def check(self, key: str) -> RateLimitResult:
        """Count one request against `key` and report whether it is allowed."""
        ...

    def reset(self) -> None:
        """Forget all counters."""
        ...


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """
    Process-local fixed window counters.

    Each key gets a window that starts with its first request and lasts
    `window_seconds`; the counter starts over once the window has elapsed.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    async def check(self, key: str) -> RateLimitResult:
        """Count one request against `key`."""
        return self.hit(key)

    def hit(self, key: str) -> RateLimitResult:
        """Synchronous counterpart of `check`."""
        limit = self.config.requests
        window_seconds = self.config.window_seconds
        now = self._clock()

        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.started_at + window_seconds:
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            count = window.count
            reset = max(1, math.ceil(window.started_at + window_seconds - now))

        if count > limit:
            logger.warning(
                "rate_limit_exceeded",
                extra={"endpoint": key, "limit": limit, "window_seconds": window_seconds},
            )
            return RateLimitResult(
                allowed=False, limit=limit, remaining=0, reset=reset, retry_after=reset,
            )
        return RateLimitResult(
            allowed=True, limit=limit, remaining=limit - count, reset=reset, retry_after=0,
        )

    def reset(self) -> None:
        """Forget all counters."""
        with self._lock:
            self._windows.clear()


class RedisRateLimiter:
    """
    Fixed window counters shared through Redis.

    Lets several service processes enforce one limit per endpoint. When Redis
    is unavailable, requests are counted by a process-local limiter instead of
    being let through unchecked.
    """

    key_prefix = "rate:endpoint:"

    def __init__(
        self,
        client: RedisClient,
        config: RateLimitConfig,
        fallback: FixedWindowRateLimiter | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._fallback = fallback or FixedWindowRateLimiter(config)

    async def check(self, key: str) -> RateLimitResult:
        """Count one request against `key`."""
        limit = self.config.requests
        window_seconds = self.config.window_seconds

        counts = await self._client.fixed_window(self.key_prefix + key, limit, window_seconds)
        if counts is None:
            logger.warning("redis_unavailable", extra={"operation": "rate_limit"})
            return self._fallback.hit(key)

        allowed, remaining, ttl, retry_after = counts
        reset = ttl if ttl > 0 else window_seconds
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                extra={"endpoint": key, "limit": limit, "window_seconds": window_seconds},
            )
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=reset,
            retry_after=max(1, retry_after) if not allowed else 0,
        )

    def reset(self) -> None:
        """
        Forget process-local fallback counters.

        Redis keys expire on their own at the end of each window.
        """
        self._fallback.reset()


def build_rate_limiter(
    settings: Settings, redis_client: RedisClient | None = None,
) -> RateLimiter:
    """Create the limiter described by settings."""
    config = RateLimitConfig(
        requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    if settings.redis_enabled and redis_client is not None:
        return RedisRateLimiter(redis_client, config)
    return FixedWindowRateLimiter(config)
