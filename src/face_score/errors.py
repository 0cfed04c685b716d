"""Application error types shared by services, adapters and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from face_score.domain.rate_limit import RateLimitDecision


@dataclass
class AppError(Exception):
    """Base error carrying a stable code and a short user-facing message."""

    code: str
    message: str
    details: dict[str, object] = field(default_factory=dict)

    status_code: ClassVar[int] = 500

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        """Return the HTTP status used when this error reaches a client."""
        return self.status_code


class ValidationError(AppError):
    """Bad, missing or oversized input."""

    status_code = 400


@dataclass
class AuthError(AppError):
    """Missing/expired session or a disallowed identity."""

    forbidden: bool = False

    status_code = 401

    @property
    def http_status(self) -> int:
        """Return 403 for disallowed identities and 401 otherwise."""
        return 403 if self.forbidden else self.status_code


@dataclass
class RateLimitedError(AppError):
    """Request budget for the current window is exhausted."""

    decision: RateLimitDecision | None = None

    status_code = 429


@dataclass
class UpstreamError(AppError):
    """Third-party API failure or malformed response."""

    timeout: bool = False

    status_code = 502

    @property
    def http_status(self) -> int:
        """Return 504 for timeouts and 502 for explicit failures."""
        return 504 if self.timeout else self.status_code


class StorageError(AppError):
    """Object or metadata store failure."""

    status_code = 500


class NotFoundError(AppError):
    """Requested record or object does not exist."""

    status_code = 404
