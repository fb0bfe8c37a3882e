"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI

from salary_engine.core import get_logger, get_settings
from salary_engine.routers import admin_router, salaries_router

LOGGER = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Salary Estimation Engine", version="0.1.0")
    app.include_router(salaries_router)
    app.include_router(admin_router)

    @app.on_event("startup")
    def log_configuration() -> None:
        settings = get_settings()
        LOGGER.info(
            "Salary engine starting: db=%s admin_enabled=%s external_api=%s",
            settings.database.masked_url,
            settings.admin.enabled,
            settings.external.api_enabled,
        )
        if not settings.admin.enabled:
            LOGGER.warning("ADMIN_KEY is not set; admin routes will reject every request")

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
