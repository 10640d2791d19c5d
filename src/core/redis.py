"""Redis connection used for shared rate limit counters."""
import logging

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import NoScriptError, RedisError

logger = logging.getLogger(__name__)

# Atomic fixed window counter: the first hit in a window sets the expiry,
# so the key disappears (and the count restarts) when the window ends.
# Returns {allowed, remaining, ttl, retry_after}.
FIXED_WINDOW_SCRIPT = """
local key = KEYS[1]
local limit = tonumber(ARGV[1])
local window = tonumber(ARGV[2])

local count = redis.call('INCR', key)
if count == 1 then
    redis.call('EXPIRE', key, window)
end
local ttl = redis.call('TTL', key)

if count <= limit then
    return {1, limit - count, ttl, 0}
else
    return {0, 0, ttl, ttl}
end
"""

FixedWindowCounts = tuple[int, int, int, int]


class RedisClient:
    """
    Pooled async Redis connection that never raises on Redis failures.

    Every call returns None when Redis is disabled, unreachable, or errors,
    leaving the caller to decide how to degrade.
    """

    def __init__(self, url: str, enabled: bool = True, max_connections: int = 10) -> None:
        self._url = url
        self._enabled = enabled
        self._max_connections = max_connections
        self._client: Redis | None = None
        self._script_sha: str | None = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Open the pool and register the counter script."""
        if not self._enabled:
            logger.info("Redis disabled by configuration")
            return
        client = Redis(
            connection_pool=ConnectionPool.from_url(
                self._url, max_connections=self._max_connections,
            ),
        )
        try:
            await client.ping()
            self._script_sha = await client.script_load(FIXED_WINDOW_SCRIPT)
        except RedisError as e:
            logger.warning("Redis connection failed: %s", e)
            await client.aclose()
            return
        self._client = client
        logger.info("Redis connected", extra={"url": self._url})

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        self._script_sha = None
        logger.info("Redis connection closed")

    async def fixed_window(
        self, key: str, limit: int, window_seconds: int,
    ) -> FixedWindowCounts | None:
        """Count one hit on `key`; None if Redis could not answer."""
        if self._client is None or self._script_sha is None:
            return None
        try:
            try:
                result = await self._client.evalsha(
                    self._script_sha, 1, key, limit, window_seconds,
                )
            except NoScriptError:
                # Script cache was flushed (e.g. Redis restarted): register again
                self._script_sha = await self._client.script_load(FIXED_WINDOW_SCRIPT)
                result = await self._client.evalsha(
                    self._script_sha, 1, key, limit, window_seconds,
                )
        except RedisError as e:
            logger.warning("Redis rate limit script failed: %s", e)
            return None
        allowed, remaining, ttl, retry_after = (int(v) for v in result)
        return allowed, remaining, ttl, retry_after
