"""Supabase-backed rate limit counters."""

from dataclasses import dataclass

from supabase import Client

from face_score.services.rate_limit import RateLimitStore


@dataclass
class SupabaseRateLimitStore(RateLimitStore):
    """Counter store using an atomic upsert-and-increment database function."""

    client: Client

    def increment(self, key: str, ttl_seconds: int) -> int:
        """Increment the window counter via the increment_rate_limit function."""
        response = self.client.rpc(
            "increment_rate_limit",
            {"p_key": key, "p_ttl_seconds": ttl_seconds},
        ).execute()
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if isinstance(data, dict):
            data = next(iter(data.values()), None)
        if not isinstance(data, int):
            raise RuntimeError("Rate limit counter returned no value")
        return data
