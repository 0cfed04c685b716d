"""Admin login, logout and session validation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Cookie, Depends, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from face_score.api.dependencies import (
    clear_session_cookie,
    get_container,
    rate_limit,
    set_session_cookie,
)
from face_score.api.models import LoginRequest
from face_score.errors import AuthError, ValidationError

if TYPE_CHECKING:
    from face_score.containers import AppContainer

router = APIRouter(prefix="/api/auth", tags=["auth"])

_NO_STORE = {"Cache-Control": "no-store, max-age=0"}


@router.post("", dependencies=[Depends(rate_limit("/api/auth"))])
async def login(
    body: LoginRequest, request: Request, response: Response
) -> dict[str, object]:
    """Log in with the admin username and password."""
    container: AppContainer = get_container(request)
    session = container.auth_service.login_with_password(body.username, body.password)
    set_session_cookie(response, session.id, container.settings.session_ttl_seconds)
    return {"success": True, "message": "Logged in"}


@router.get("")
async def whoami(
    request: Request, session_id: str | None = Cookie(default=None)
) -> Response:
    """Validate the session, extend it and report the username."""
    container: AppContainer = get_container(request)
    try:
        session = container.auth_service.validate(session_id)
    except AuthError as exc:
        expired = JSONResponse(
            status_code=exc.http_status,
            content={
                "success": False,
                "error": {"code": exc.code, "message": exc.message},
            },
            headers=_NO_STORE,
        )
        if session_id:
            clear_session_cookie(expired)
        return expired
    response = JSONResponse(
        content={
            "success": True,
            "message": "Logged in",
            "data": {"username": session.username},
        },
        headers=_NO_STORE,
    )
    set_session_cookie(response, session.id, container.settings.session_ttl_seconds)
    return response


@router.delete("")
async def logout(
    request: Request,
    response: Response,
    session_id: str | None = Cookie(default=None),
) -> dict[str, object]:
    """Revoke the current session and clear the cookie."""
    container: AppContainer = get_container(request)
    container.auth_service.logout(session_id)
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out"}


@router.get("/github", dependencies=[Depends(rate_limit("/api/auth"))])
async def github_login(request: Request) -> RedirectResponse:
    """Redirect to GitHub to start the OAuth flow."""
    container: AppContainer = get_container(request)
    callback = request.url_for("github_callback").replace(scheme="https")
    url = container.auth_service.github_authorize_url(str(callback))
    return RedirectResponse(url, status_code=302)


@router.get(
    "/github/callback",
    name="github_callback",
    dependencies=[Depends(rate_limit("/api/auth"))],
)
async def github_callback(
    request: Request, code: str | None = None
) -> RedirectResponse:
    """Finish the OAuth flow and open a session for allowed accounts."""
    if not code:
        raise ValidationError(
            code="missing_code", message="GitHub authorization code is missing"
        )
    container: AppContainer = get_container(request)
    session = await container.auth_service.login_with_github(code)
    response = RedirectResponse("/images", status_code=302, headers=_NO_STORE)
    set_session_cookie(response, session.id, container.settings.session_ttl_seconds)
    return response
