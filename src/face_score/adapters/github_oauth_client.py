"""GitHub OAuth authorization-code client."""

from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from face_score.errors import UpstreamError
from face_score.services.auth import OAuthClient

_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
_TOKEN_URL = "https://github.com/login/oauth/access_token"
_USER_URL = "https://api.github.com/user"


@dataclass
class HttpxGitHubOAuthClient(OAuthClient):
    """GitHub OAuth client implemented with httpx."""

    client_id: str
    client_secret: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, client_id: str, client_secret: str, timeout: float = 15.0
    ) -> "HttpxGitHubOAuthClient":
        """Create a GitHub OAuth client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    def authorize_url(self, redirect_uri: str) -> str:
        """Return the GitHub authorize URL for the read:user scope."""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": redirect_uri,
                "scope": "read:user",
            }
        )
        return f"{_AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> str:
        """Exchange the callback code for an access token."""
        payload = await self._request_json(
            "POST",
            _TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
            },
            headers={"Accept": "application/json"},
        )
        token = payload.get("access_token")
        if not isinstance(token, str) or not token:
            error = payload.get("error") or "unknown_error"
            raise UpstreamError(
                code="oauth_exchange_failed",
                message="GitHub login failed, please try again",
                details={"error": str(error)},
            )
        return token

    async def fetch_login(self, access_token: str) -> str:
        """Return the GitHub login for the access token."""
        payload = await self._request_json(
            "GET",
            _USER_URL,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": "face-score",
            },
        )
        login = payload.get("login")
        if not isinstance(login, str) or not login:
            raise UpstreamError(
                code="oauth_profile_failed",
                message="GitHub login failed, please try again",
            )
        return login

    async def _request_json(
        self, method: str, url: str, **kwargs: object
    ) -> dict[str, object]:
        try:
            response = await self.http_client.request(
                method, url, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise UpstreamError(
                code="upstream_timeout", message="GitHub timed out", timeout=True
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(
                code="upstream_unavailable",
                message="GitHub login failed, please try again",
            ) from exc
        if not isinstance(payload, dict):
            raise UpstreamError(
                code="upstream_malformed", message="GitHub returned bad data"
            )
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
