"""Domain models for request rate limiting."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RouteLimit:
    """Request budget for one logical route."""

    limit: int
    window_seconds: int = 60


ROUTE_LIMITS: dict[str, RouteLimit] = {
    "/api/score": RouteLimit(limit=10),
    "/api/fortune": RouteLimit(limit=10),
    "/api/image": RouteLimit(limit=50),
    "/api/images": RouteLimit(limit=50),
    "/api/cleanup": RouteLimit(limit=5),
    "/api/verify": RouteLimit(limit=5),
    "/api/auth": RouteLimit(limit=20),
}


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against its window.

    ``reset`` and ``retry_after`` are seconds until the window boundary.
    ``enforced`` is False when the counter store was unreachable and the
    request was let through without counting.
    """

    allowed: bool
    limit: int
    remaining: int
    reset: int
    retry_after: int | None = None
    enforced: bool = True

    def headers(self) -> dict[str, str]:
        """Return the rate limit response headers for this decision."""
        if not self.enforced:
            return {}
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers
