"""Cloudflare Turnstile verification client."""

import logging
from dataclasses import dataclass

import httpx

from face_score.services.verification import BotVerifier

_SITEVERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"

_logger = logging.getLogger(__name__)


@dataclass
class HttpxTurnstileVerifier(BotVerifier):
    """Verifies Turnstile tokens with httpx."""

    secret_key: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, secret_key: str, timeout: float = 10.0) -> "HttpxTurnstileVerifier":
        """Create a verifier with a managed httpx session."""
        return cls(
            secret_key=secret_key, http_client=httpx.AsyncClient(), timeout=timeout
        )

    async def verify(self, token: str) -> bool:
        """Return True only when siteverify confirms the token."""
        try:
            response = await self.http_client.post(
                _SITEVERIFY_URL,
                data={"secret": self.secret_key, "response": token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            _logger.exception("Turnstile verification request failed")
            return False
        return bool(isinstance(payload, dict) and payload.get("success"))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
