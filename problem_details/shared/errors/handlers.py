"""
Problem Details wiring for Starlette and FastAPI applications.

Reads the application settings once and installs:
- ErrorHandlerMiddleware around the application
- An HTTPException handler so framework HTTP errors are problems too

Settings are never consulted per request.
"""

import logging
from typing import Any, Optional

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import Response

from problem_details.core.config import Settings
from problem_details.core.config import settings as app_settings
from problem_details.domain.errors import HasStatusCode
from problem_details.domain.problem import BODYLESS_STATUSES, ProblemDetails
from problem_details.domain.status_text import status_text
from problem_details.shared.errors.middleware import (
    ErrorHandlerMiddleware,
    ResponseFactory,
)
from problem_details.shared.logging import get_error_logger

# Starlette's HTTPException exposes ``status_code``
HasStatusCode.register(HTTPException)


def default_response_factory(status_code: int) -> Response:
    """Create an empty response with the given status."""
    return Response(status_code=status_code)


async def http_exception_handler(_request: Request, exc: HTTPException) -> Response:
    """Render a framework HTTPException as a problem response.

    Headers set on the exception (``WWW-Authenticate``, ``Retry-After``)
    are kept. Structured (non-string) details go to ``errors``.
    """
    if exc.status_code in BODYLESS_STATUSES:
        return Response(status_code=exc.status_code, headers=exc.headers)

    problem = ProblemDetails.create(exc.status_code, status_text(exc.status_code))
    if isinstance(exc.detail, str):
        problem = problem.with_detail(exc.detail)
    else:
        problem = problem.with_additional("errors", exc.detail)

    response = Response(status_code=exc.status_code, headers=exc.headers)
    return problem.to_response(response)


def _middleware_options(
    settings: Settings,
    response_factory: Optional[ResponseFactory],
    logger: Optional[logging.Logger],
) -> dict[str, Any]:
    if logger is None and settings.log_errors:
        logger = get_error_logger()

    return {
        "response_factory": response_factory or default_response_factory,
        "logger": logger,
        "development_mode": settings.debug,
        "exception_status_map": dict(settings.problem_details.exception_map),
    }


def problem_details_middleware(
    settings: Optional[Settings] = None,
    *,
    response_factory: Optional[ResponseFactory] = None,
    logger: Optional[logging.Logger] = None,
) -> Middleware:
    """Build the middleware entry for ``Starlette(middleware=[...])``.

    Args:
        settings: Source of ``debug`` and ``problem_details.exception_map``.
            Defaults to the application settings.
        response_factory: Creates the response a problem is written onto.
        logger: Overrides the default error logger.
    """
    options = _middleware_options(settings or app_settings, response_factory, logger)
    return Middleware(ErrorHandlerMiddleware, **options)


def register_problem_details(
    app: Starlette,
    settings: Optional[Settings] = None,
    *,
    response_factory: Optional[ResponseFactory] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Install Problem Details error handling on an application.

    Args:
        app: The Starlette or FastAPI application instance.
        settings: Source of ``debug`` and ``problem_details.exception_map``.
            Defaults to the application settings.
        response_factory: Creates the response a problem is written onto.
        logger: Overrides the default error logger.
    """
    options = _middleware_options(settings or app_settings, response_factory, logger)
    app.add_middleware(ErrorHandlerMiddleware, **options)
    app.add_exception_handler(HTTPException, http_exception_handler)
