"""
Application entry point.

Creates the FastAPI application and wires together:
- Logging configuration
- Problem Details error handling (middleware + HTTPException handler)
- Routers

No business logic belongs here. Nothing is built at import time; serve with
``uvicorn problem_details.main:create_app --factory``.
"""

from typing import Optional

from fastapi import FastAPI

from problem_details.core.config import Settings
from problem_details.core.config import settings as app_settings
from problem_details.interfaces.health import router as health_router
from problem_details.shared.errors.handlers import register_problem_details
from problem_details.shared.logging import configure_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application.

    Args:
        settings: Application settings. Defaults to the environment.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or app_settings
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # --- Error Handling ---
    register_problem_details(app, settings)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")

    return app
