"""Shared FastAPI dependencies: container access, rate limits, sessions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Cookie, Request, Response

from face_score.domain.rate_limit import ROUTE_LIMITS, RateLimitDecision
from face_score.domain.sessions import AdminSession  # noqa: TC001
from face_score.errors import RateLimitedError
from face_score.services.rate_limit import client_ip

if TYPE_CHECKING:
    from face_score.containers import AppContainer

SESSION_COOKIE = "session_id"


def get_container(request: Request) -> AppContainer:
    """Return the application container."""
    return request.app.state.container


def rate_limit(route: str) -> Callable[[Request, Response], Awaitable[RateLimitDecision]]:
    """Build a dependency that counts the request against the route budget."""
    route_limit = ROUTE_LIMITS[route]

    async def enforce(request: Request, response: Response) -> RateLimitDecision:
        container = get_container(request)
        decision = container.rate_limiter.hit(
            client_ip(request.headers),
            route,
            route_limit.limit,
            route_limit.window_seconds,
        )
        if not decision.allowed:
            raise RateLimitedError(
                code="rate_limited",
                message="Too many requests, please try again later",
                decision=decision,
            )
        response.headers.update(decision.headers())
        return decision

    return enforce


async def require_session(
    request: Request,
    session_id: str | None = Cookie(default=None),
) -> AdminSession:
    """Ensure the request carries a live admin session."""
    return get_container(request).auth_service.validate(session_id)


def set_session_cookie(response: Response, session_id: str, max_age: int) -> None:
    """Attach the session cookie to a response."""
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        max_age=max_age,
        path="/",
        secure=True,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        SESSION_COOKIE, path="/", secure=True, httponly=True, samesite="lax"
    )
