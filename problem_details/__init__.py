"""
problem-details: RFC 7807 error responses for Starlette and FastAPI.

Unhandled errors raised while a request is processed are intercepted
and rendered as ``application/problem+json`` responses.

Layers:
    - domain: ProblemDetails builder, error taxonomy, error diagnostics.
    - shared: Error handling middleware, wiring, logging configuration.
    - interfaces: FastAPI routers and schemas.
    - core: Settings.

Usage:
    from fastapi import FastAPI
    from problem_details import register_problem_details

    app = FastAPI()
    register_problem_details(app)
"""

from problem_details.domain.errors import (
    HasStatusCode,
    HttpProblem,
    ProblemDetailsError,
    ResponseConstructionError,
    SerializationError,
)
from problem_details.domain.problem import ProblemDetails
from problem_details.shared.errors.handlers import (
    default_response_factory,
    problem_details_middleware,
    register_problem_details,
)
from problem_details.shared.errors.middleware import (
    ErrorHandlerMiddleware,
    InterceptorConfig,
)

__all__ = [
    "ErrorHandlerMiddleware",
    "HasStatusCode",
    "HttpProblem",
    "InterceptorConfig",
    "ProblemDetails",
    "ProblemDetailsError",
    "ResponseConstructionError",
    "SerializationError",
    "default_response_factory",
    "problem_details_middleware",
    "register_problem_details",
]
