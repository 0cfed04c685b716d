"""Bot verification for public submission endpoints."""

from dataclasses import dataclass
from typing import Protocol

from face_score.errors import AuthError


class BotVerifier(Protocol):
    """Interface for a challenge token verification provider."""

    async def verify(self, token: str) -> bool:
        """Return whether the token proves a human submitted the request."""


@dataclass
class VerificationService:
    """Checks challenge tokens unless verification is disabled."""

    verifier: BotVerifier | None

    async def ensure_human(self, token: str | None, *, is_miniprogram: bool) -> None:
        """Raise AuthError unless the request passes bot verification.

        Mini-program clients cannot render the web challenge and are exempt.
        """
        if self.verifier is None or is_miniprogram:
            return
        if not token or not await self.verifier.verify(token):
            raise AuthError(
                code="verification_failed",
                message="Verification failed, please retry",
                forbidden=True,
            )
