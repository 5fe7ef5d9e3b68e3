"""
Error handling middleware with RFC 7807 Problem Details support.

Wraps the rest of the application. Responses pass through untouched;
any Exception raised downstream is logged and turned into an
``application/problem+json`` response.

Status resolution, highest precedence first:
1. An entry for the error's concrete type in the exception status map.
2. The status the error reports through the HasStatusCode capability.
3. 500.

Development mode adds the stack trace, source location, request
context and the chain of causing errors to every problem response.
Never enable it in production.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from problem_details.domain.errors import DEFAULT_STATUS, reported_status_code
from problem_details.domain.exception_info import (
    error_code,
    error_location,
    format_exception_chain,
    format_trace,
    type_identifier,
)
from problem_details.domain.problem import BODYLESS_STATUSES, ProblemDetails
from problem_details.domain.status_text import status_text

SERVER_ERROR_THRESHOLD = 500

ResponseFactory = Callable[[int], Response]
ExceptionStatusMap = Mapping[Union[str, type], int]


@dataclass(frozen=True)
class InterceptorConfig:
    """Immutable configuration of the error handling middleware.

    Attributes:
        response_factory: Creates a fresh response for a status code.
        logger: Where intercepted errors are reported. None disables logging.
        development_mode: Disclose diagnostic fields in responses.
        exception_status_map: Error type identifier to status code.
            Exception classes are accepted as keys and normalized.
    """

    response_factory: ResponseFactory
    logger: Optional[logging.Logger] = None
    development_mode: bool = False
    exception_status_map: ExceptionStatusMap = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {
            key if isinstance(key, str) else type_identifier(key): status
            for key, status in self.exception_status_map.items()
        }
        object.__setattr__(
            self, "exception_status_map", MappingProxyType(normalized)
        )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware that renders unhandled errors as Problem Details.

    Usage:
        app.add_middleware(
            ErrorHandlerMiddleware,
            response_factory=default_response_factory,
            logger=logging.getLogger("problem_details"),
            development_mode=settings.debug,
            exception_status_map={"myapp.errors.NotFound": 404},
        )
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        response_factory: ResponseFactory,
        logger: Optional[logging.Logger] = None,
        development_mode: bool = False,
        exception_status_map: Optional[ExceptionStatusMap] = None,
    ) -> None:
        super().__init__(app)
        self.config = InterceptorConfig(
            response_factory=response_factory,
            logger=logger,
            development_mode=development_mode,
            exception_status_map=exception_status_map or {},
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request through the error interceptor."""
        return await self.process(request, call_next)

    async def process(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Run the downstream handler, converting a raised error to a problem.

        Only Exception subclasses are intercepted; cancellation and
        interpreter exits keep propagating.
        """
        try:
            return await call_next(request)
        except Exception as exc:
            return self.handle_exception(exc, request)

    def handle_exception(self, exc: Exception, request: Request) -> Response:
        """Log an intercepted error and render it as a problem response.

        Logging, serialization and response errors propagate to the caller.
        """
        status = self.resolve_status_code(exc)

        if self.config.logger is not None:
            self._log_exception(exc, request, status)

        # 204 and 304 responses must not carry a body
        if status in BODYLESS_STATUSES:
            return self.config.response_factory(status)

        problem = ProblemDetails.create(status, status_text(status)).with_detail(
            str(exc)
        )

        if self.config.development_mode:
            problem = self._with_diagnostics(problem, exc, request)

        response = self.config.response_factory(status)
        return problem.to_response(response)

    def resolve_status_code(self, exc: BaseException) -> int:
        """Return the HTTP status that represents an error."""
        mapped = self.config.exception_status_map.get(type_identifier(type(exc)))
        if mapped is not None:
            return mapped

        reported = reported_status_code(exc)
        if reported is not None:
            return reported

        return DEFAULT_STATUS

    def _log_exception(
        self, exc: BaseException, request: Request, status: int
    ) -> None:
        file, line = error_location(exc)
        context = {
            "exception_class": type_identifier(type(exc)),
            "exception_message": str(exc),
            "exception_code": error_code(exc),
            "exception_file": file,
            "exception_line": line,
            "request_method": request.method,
            "request_uri": str(request.url),
        }

        # 4xx are client errors, 5xx are server errors
        level = logging.ERROR if status >= SERVER_ERROR_THRESHOLD else logging.WARNING
        self.config.logger.log(level, "Exception caught: %s", exc, extra=context)

    def _with_diagnostics(
        self, problem: ProblemDetails, exc: BaseException, request: Request
    ) -> ProblemDetails:
        file, line = error_location(exc)
        problem = (
            problem.with_additional("trace", format_trace(exc))
            .with_additional("file", file)
            .with_additional("line", line)
            .with_additional("request_method", request.method)
            .with_additional("request_uri", str(request.url))
            .with_additional("exception_class", type_identifier(type(exc)))
        )

        previous: Optional[dict[str, Any]] = format_exception_chain(exc)
        if previous is not None:
            problem = problem.with_additional("previous_exception", previous)

        return problem
