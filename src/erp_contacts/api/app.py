"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from erp_contacts.api.gateway import router as gateway_router
from erp_contacts.app_logging import configure_logging
from erp_contacts.config import normalize_prefix
from erp_contacts.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI gateway app configured with dependencies."""
    configure_logging(container.settings.log_level)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.include_router(gateway_router, prefix=normalize_prefix(settings.gateway_prefix))

    return app
