"""Fixed-window request rate limiting."""

import logging
import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from face_score.domain.rate_limit import RateLimitDecision

_logger = logging.getLogger(__name__)

_CLIENT_IP_HEADERS = ("cf-connecting-ip", "x-forwarded-for", "x-real-ip")


class RateLimitStore(Protocol):
    """Shared counter store with an atomic per-key increment."""

    def increment(self, key: str, ttl_seconds: int) -> int:
        """Atomically add one to the counter for key and return the new count.

        The counter should expire roughly ttl_seconds after it was created.
        """


@dataclass
class RateLimiter:
    """Counts requests per (client, route) in fixed, non-overlapping windows."""

    store: RateLimitStore
    clock: Callable[[], float] = field(default=time.time)

    def hit(
        self, client_id: str, route: str, limit: int, window_seconds: int
    ) -> RateLimitDecision:
        """Count one request and decide whether it fits the current window.

        Fails open: if the store raises, the request is allowed and the
        decision is marked as not enforced.
        """
        now = math.floor(self.clock())
        window_index = now // window_seconds
        reset = window_seconds - (now % window_seconds)
        key = f"rate_limit:{client_id}:{route}:{window_index}"
        try:
            count = self.store.increment(key, ttl_seconds=window_seconds * 2)
        except Exception:
            _logger.exception("Rate limit store unavailable, allowing request")
            return RateLimitDecision(
                allowed=True,
                limit=limit,
                remaining=limit,
                reset=reset,
                enforced=False,
            )
        if count > limit:
            return RateLimitDecision(
                allowed=False,
                limit=limit,
                remaining=0,
                reset=reset,
                retry_after=reset,
            )
        return RateLimitDecision(
            allowed=True,
            limit=limit,
            remaining=limit - count,
            reset=reset,
        )


def client_ip(headers: Mapping[str, str]) -> str:
    """Extract the client IP from trusted proxy headers."""
    for name in _CLIENT_IP_HEADERS:
        value = headers.get(name)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first
    return "unknown"
