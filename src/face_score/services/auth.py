"""Admin authentication and server-side sessions."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from face_score.domain.sessions import AdminSession
from face_score.errors import AuthError

_logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for admin sessions."""

    def create_session(self, session: AdminSession) -> None:
        """Persist a new session."""

    def get_session(self, session_id: str) -> AdminSession | None:
        """Return a session by id, if present."""

    def touch_session(
        self, session_id: str, last_activity: datetime, expires_at: datetime
    ) -> None:
        """Refresh a session's activity time and expiry."""

    def delete_session(self, session_id: str) -> None:
        """Delete a session; missing sessions are ignored."""

    def delete_expired_sessions(self, now: datetime) -> int:
        """Delete sessions that expired before now and return the count."""


class OAuthClient(Protocol):
    """Interface for an authorization-code OAuth identity provider."""

    def authorize_url(self, redirect_uri: str) -> str:
        """Return the provider URL the user is redirected to."""

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""

    async def fetch_login(self, access_token: str) -> str:
        """Return the login name of the token's owner."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AuthService:
    """Issues, validates and revokes admin sessions."""

    repository: SessionRepository
    ttl_seconds: int
    admin_username: str | None = None
    admin_password: str | None = None
    oauth_client: OAuthClient | None = None
    allowed_users: set[str] = field(default_factory=set)
    clock: Callable[[], datetime] = field(default=_utcnow)

    def login_with_password(self, username: str, password: str) -> AdminSession:
        """Check admin credentials and open a session."""
        if not self.admin_username or not self.admin_password:
            raise AuthError(
                code="password_login_disabled",
                message="Password login is not configured",
            )
        username_ok = secrets.compare_digest(
            username.encode(), self.admin_username.encode()
        )
        password_ok = secrets.compare_digest(
            password.encode(), self.admin_password.encode()
        )
        if not (username_ok and password_ok):
            raise AuthError(
                code="invalid_credentials", message="Invalid username or password"
            )
        return self._open_session(username, provider="password")

    def github_authorize_url(self, redirect_uri: str) -> str:
        """Return the GitHub authorization URL."""
        if self.oauth_client is None:
            raise AuthError(
                code="oauth_not_configured", message="GitHub login is not configured"
            )
        return self.oauth_client.authorize_url(redirect_uri)

    async def login_with_github(self, code: str) -> AdminSession:
        """Complete the GitHub flow and open a session for allowed users."""
        if self.oauth_client is None:
            raise AuthError(
                code="oauth_not_configured", message="GitHub login is not configured"
            )
        access_token = await self.oauth_client.exchange_code(code)
        login = await self.oauth_client.fetch_login(access_token)
        if login not in self.allowed_users:
            _logger.warning("GitHub login rejected for %s", login)
            raise AuthError(
                code="identity_not_allowed",
                message="This GitHub account is not authorized",
                forbidden=True,
            )
        return self._open_session(login, provider="github")

    def validate(self, session_id: str | None) -> AdminSession:
        """Return the live session and push its expiry forward."""
        if not session_id:
            raise AuthError(code="not_logged_in", message="Not logged in")
        session = self.repository.get_session(session_id)
        now = self.clock()
        if session is None:
            raise AuthError(code="session_expired", message="Session expired")
        if session.expires_at <= now:
            self.repository.delete_session(session_id)
            raise AuthError(code="session_expired", message="Session expired")
        expires_at = now + timedelta(seconds=self.ttl_seconds)
        self.repository.touch_session(session_id, now, expires_at)
        return AdminSession(
            id=session.id,
            username=session.username,
            provider=session.provider,
            created_at=session.created_at,
            last_activity=now,
            expires_at=expires_at,
        )

    def logout(self, session_id: str | None) -> None:
        """Revoke a session if one is given."""
        if session_id:
            self.repository.delete_session(session_id)

    def _open_session(self, username: str, provider: str) -> AdminSession:
        now = self.clock()
        session = AdminSession(
            id=secrets.token_urlsafe(32),
            username=username,
            provider=provider,
            created_at=now,
            last_activity=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        self.repository.create_session(session)
        purged = self.repository.delete_expired_sessions(now)
        if purged:
            _logger.info("Purged %s expired sessions", purged)
        _logger.info("Session opened for %s via %s", username, provider)
        return session
