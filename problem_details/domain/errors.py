"""
Errors and capabilities for the problem details bounded context.

All errors raised by the builder and the interceptor are defined here.
HasStatusCode is the explicit capability the status resolver checks for.
No framework imports allowed.
"""

from abc import ABC, abstractmethod
from typing import Optional

DEFAULT_STATUS = 500


class ProblemDetailsError(Exception):
    """Base error for all problem details errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class SerializationError(ProblemDetailsError):
    """Raised when problem fields cannot be encoded to (or decoded from) JSON."""


class ResponseConstructionError(ProblemDetailsError):
    """Raised when the response carrier rejects the status, headers or body."""


class HasStatusCode(ABC):
    """Capability of an error that knows which HTTP status represents it.

    Error classes opt in by subclassing. Classes from other libraries
    can be registered as virtual subclasses with ``HasStatusCode.register``
    as long as they expose a ``status_code`` attribute.
    """

    @property
    @abstractmethod
    def status_code(self) -> int:
        """HTTP status code reported by the error."""
        raise NotImplementedError


class HttpProblem(ProblemDetailsError, HasStatusCode):
    """Raised by application code that wants a specific response status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        return self._status_code


def reported_status_code(exc: BaseException) -> Optional[int]:
    """Return the status an error reports about itself.

    Args:
        exc: The caught error.

    Returns:
        None if the error lacks the HasStatusCode capability, the
        reported code if it is an integer, DEFAULT_STATUS otherwise.
    """
    if not isinstance(exc, HasStatusCode):
        return None
    status = exc.status_code
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return DEFAULT_STATUS
