"""
FastAPI application entrypoint for the credential service.
"""

from __future__ import annotations

from fastapi import FastAPI

from authchain.api.routes import router as api_router
from authchain.core.config import get_settings
from authchain.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="authchain",
        version="0.1.0",
        description="Credential chain health and account management API.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
