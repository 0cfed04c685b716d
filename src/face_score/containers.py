"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from face_score.adapters.facepp_client import HttpxFaceppClient
from face_score.adapters.github_oauth_client import HttpxGitHubOAuthClient
from face_score.adapters.openai_text_client import OpenAITextClient
from face_score.adapters.supabase_image_store import SupabaseImageStore
from face_score.adapters.supabase_rate_limit_store import SupabaseRateLimitStore
from face_score.adapters.supabase_score_repository import SupabaseScoreRepository
from face_score.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from face_score.adapters.turnstile_client import HttpxTurnstileVerifier
from face_score.config import Settings, parse_allowed_users
from face_score.services.auth import AuthService
from face_score.services.comments import CommentService
from face_score.services.faces import FaceService
from face_score.services.images import ImageService
from face_score.services.rate_limit import RateLimiter
from face_score.services.retention import RetentionService
from face_score.services.scores import ScoreService
from face_score.services.verification import VerificationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    rate_limiter: RateLimiter
    verification_service: VerificationService
    image_service: ImageService
    score_service: ScoreService
    retention_service: RetentionService
    auth_service: AuthService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.upstream_timeout_seconds
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    score_repository = SupabaseScoreRepository(supabase_client)
    session_repository = SupabaseSessionRepository(supabase_client)
    image_service = ImageService(
        SupabaseImageStore(supabase_client, bucket=resolved_settings.storage_bucket)
    )
    rate_limiter = RateLimiter(SupabaseRateLimitStore(supabase_client))

    facepp_client = HttpxFaceppClient.create(
        api_key=resolved_settings.facepp_api_key,
        api_secret=resolved_settings.facepp_api_secret,
        base_url=resolved_settings.facepp_base_url,
        timeout=timeout,
    )
    text_client = (
        OpenAITextClient.create(
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_model,
            timeout=timeout,
        )
        if resolved_settings.openai_api_key
        else None
    )
    turnstile_verifier = (
        HttpxTurnstileVerifier.create(resolved_settings.turnstile_secret_key.strip())
        if resolved_settings.turnstile_secret_key
        and resolved_settings.turnstile_secret_key.strip()
        else None
    )
    github_client = (
        HttpxGitHubOAuthClient.create(
            client_id=resolved_settings.github_client_id,
            client_secret=resolved_settings.github_client_secret,
            timeout=timeout,
        )
        if resolved_settings.github_client_id and resolved_settings.github_client_secret
        else None
    )

    score_service = ScoreService(
        face_service=FaceService(facepp_client),
        comment_service=CommentService(text_client),
        image_service=image_service,
        repository=score_repository,
    )
    retention_service = RetentionService(
        repository=score_repository,
        image_service=image_service,
        retention_months=resolved_settings.retention_months,
    )
    auth_service = AuthService(
        repository=session_repository,
        ttl_seconds=resolved_settings.session_ttl_seconds,
        admin_username=resolved_settings.admin_username,
        admin_password=resolved_settings.admin_password,
        oauth_client=github_client,
        allowed_users=parse_allowed_users(resolved_settings.github_allowed_users),
    )

    async def close_resources() -> None:
        await facepp_client.close()
        if text_client is not None:
            await text_client.close()
        if turnstile_verifier is not None:
            await turnstile_verifier.close()
        if github_client is not None:
            await github_client.close()

    return AppContainer(
        settings=resolved_settings,
        rate_limiter=rate_limiter,
        verification_service=VerificationService(turnstile_verifier),
        image_service=image_service,
        score_service=score_service,
        retention_service=retention_service,
        auth_service=auth_service,
        close_resources=close_resources,
    )
