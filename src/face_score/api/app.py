"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from face_score.api.admin import router as admin_router
from face_score.api.auth import router as auth_router
from face_score.api.errors import register_exception_handlers
from face_score.api.public import router as public_router
from face_score.app_logging import configure_logging
from face_score.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_exception_handlers(app, debug=container.settings.debug)

    app.include_router(public_router)
    app.include_router(auth_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
