"""Exception handlers producing the shared error response shape."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from face_score.errors import AppError, RateLimitedError

_logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Install handlers for application, validation and unexpected errors."""

    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        _logger.warning(
            "Request failed: path=%s code=%s status=%s",
            request.url.path,
            exc.code,
            exc.http_status,
        )
        error: dict[str, object] = {"code": exc.code, "message": exc.message}
        if debug and exc.details:
            error["details"] = exc.details
        content: dict[str, object] = {"success": False, "error": error}
        headers: dict[str, str] = {}
        if isinstance(exc, RateLimitedError) and exc.decision is not None:
            headers = exc.decision.headers()
            content["retryAfter"] = exc.decision.retry_after
        return JSONResponse(
            status_code=exc.http_status, content=content, headers=headers or None
        )

    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error: dict[str, object] = {
            "code": "invalid_request",
            "message": "Invalid request parameters",
        }
        if debug:
            error["details"] = jsonable_errors(exc)
        return JSONResponse(status_code=400, content={"success": False, "error": error})

    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _logger.exception("Unhandled error on %s", request.url.path)
        error: dict[str, object] = {
            "code": "internal_error",
            "message": "Internal server error",
        }
        if debug:
            error["details"] = {"type": type(exc).__name__, "detail": str(exc)}
        return JSONResponse(status_code=500, content={"success": False, "error": error})

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Return validation errors reduced to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]
