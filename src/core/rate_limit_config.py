"""
Rate limiting configuration and types.

This module contains the policy types for rate limiting - the "what" limits
to apply, separate from the "how" (enforcement logic in rate_limiter.py).

Limits are keyed by endpoint (HTTP method + route template), not by caller:
they protect backend capacity for a given operation.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """Fixed window policy: at most `requests` per `window_seconds`."""

    requests: int = 5
    window_seconds: int = 1


@dataclass
class RateLimitResult:
    """Result of a rate limit check with all info needed for headers."""

    allowed: bool
    limit: int  # Max requests in current window
    remaining: int  # Requests remaining in current window
    reset: int  # Seconds until the current window resets
    retry_after: int  # Seconds until retry allowed (0 if allowed)

    def headers(self) -> dict[str, str]:
        """Response headers describing this result."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimitExceededError(Exception):
    """Raised when rate limit is exceeded."""

    def __init__(self, result: RateLimitResult) -> None:
        self.result = result
        super().__init__("Rate limit exceeded")


def endpoint_key(method: str, path: str) -> str:
    """Build the limiter key for an endpoint, e.g. 'PATCH:/bookmarks/{bookmark_id}'."""
    return f"{method.upper()}:{path}"
