"""Public endpoints used by the web page and the mini-program client."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import Response

from face_score.api.dependencies import get_container, rate_limit
from face_score.api.models import ImageSubmission
from face_score.domain.rate_limit import RateLimitDecision  # noqa: TC001
from face_score.services.images import decode_image_payload

if TYPE_CHECKING:
    from face_score.containers import AppContainer

router = APIRouter(prefix="/api", tags=["public"])

_MINIPROGRAM = "miniprogram"


def _is_miniprogram(body: ImageSubmission, x_app_type: str | None) -> bool:
    return _MINIPROGRAM in {body.app_type, x_app_type}


@router.post("/score")
async def score(
    body: ImageSubmission,
    request: Request,
    x_app_type: str | None = Header(default=None),
    _: RateLimitDecision = Depends(rate_limit("/api/score")),
) -> dict[str, object]:
    """Score a face image and return the score with a comment."""
    container: AppContainer = get_container(request)
    image_bytes = decode_image_payload(body.image)
    await container.verification_service.ensure_human(
        body.turnstile_response,
        is_miniprogram=_is_miniprogram(body, x_app_type),
    )
    result = await container.score_service.submit(image_bytes)
    payload: dict[str, object] = {
        "success": True,
        "score": result.score,
        "comment": result.comment,
        "gender": result.gender.value,
        "age": result.age,
        "key": result.key,
        "image_url": result.image_url,
    }
    if body.debug:
        payload["logs"] = result.steps
    return payload


@router.post("/fortune")
async def fortune(
    body: ImageSubmission,
    request: Request,
    x_app_type: str | None = Header(default=None),
    _: RateLimitDecision = Depends(rate_limit("/api/fortune")),
) -> dict[str, object]:
    """Return a temperament report for a face image."""
    container: AppContainer = get_container(request)
    image_bytes = decode_image_payload(body.image)
    await container.verification_service.ensure_human(
        body.turnstile_response,
        is_miniprogram=_is_miniprogram(body, x_app_type),
    )
    result = await container.score_service.fortune(image_bytes)
    return {
        "success": True,
        "type": "fortune",
        "title": "Temperament report",
        "comment": result.comment,
        "image_url": result.image_url,
        "traits": {
            "gender": result.face.gender,
            "age": result.face.age,
            "health_score": result.face.skin_health,
        },
    }


@router.get("/image")
async def image(
    request: Request,
    image_id: str = Query(alias="id"),
    decision: RateLimitDecision = Depends(rate_limit("/api/image")),
) -> Response:
    """Serve stored image bytes by content hash."""
    container: AppContainer = get_container(request)
    stored = container.image_service.load(image_id)
    return Response(
        content=stored.data,
        media_type=stored.content_type,
        headers={
            "Cache-Control": "public, max-age=31536000",
            "ETag": f'"{stored.content_hash}"',
            **decision.headers(),
        },
    )


@router.get("/turnstile")
async def turnstile_site_key(request: Request) -> dict[str, str]:
    """Return the public Turnstile site key for the web page."""
    container: AppContainer = get_container(request)
    return {"site_key": container.settings.turnstile_site_key}
