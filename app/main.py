"""FastAPI application entrypoint for the projects API."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
import logging
import time

from fastapi import FastAPI

from app.api.projects import router as projects_router
from app.core.config import Settings
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.db import models as _models  # noqa: F401

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API application for the given settings."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    started = time.monotonic()

    app = FastAPI(title="Projects API", version=API_VERSION)
    app.state.settings = settings
    register_error_handlers(app, dev_mode=settings.is_development)
    app.include_router(projects_router)

    @app.get("/health")
    def health() -> dict[str, str | float]:
        """Liveness probe."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started, 3),
        }

    @app.get("/api")
    def api_root() -> dict[str, str | bool]:
        """API welcome endpoint."""
        return {
            "success": True,
            "message": "Welcome to the Projects API",
            "version": API_VERSION,
        }

    logger.info("Projects API configured with settings=%s", settings.safe_for_logging())
    return app


app = create_app()
