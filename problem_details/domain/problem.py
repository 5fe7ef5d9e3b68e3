"""
RFC 7807 Problem Details value object.

ProblemDetails is an immutable builder: every ``with_*`` call returns a
new instance with exactly one field changed. Serialization produces the
``application/problem+json`` wire form, either as a mapping, as JSON text
or written onto a Starlette response.

Usage:
    problem = (
        ProblemDetails.create(404, "User not found")
        .with_type("https://api.example.com/errors/user-not-found")
        .with_detail("User with ID 123 does not exist")
        .with_instance("/api/users/123")
    )
    response = problem.to_response(Response())
"""

import json
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from starlette.responses import Response

from problem_details.domain.errors import (
    DEFAULT_STATUS,
    ResponseConstructionError,
    SerializationError,
    reported_status_code,
)
from problem_details.domain.exception_info import error_location, format_trace
from problem_details.domain.status_text import status_text

ABOUT_BLANK = "about:blank"
PROBLEM_MEDIA_TYPE = "application/problem+json"
CORE_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})
MIN_STATUS = 100
MAX_STATUS = 599
BODYLESS_STATUSES = frozenset({204, 304})


@dataclass(frozen=True)
class ProblemDetails:
    """A single RFC 7807 problem occurrence.

    Attributes:
        status: HTTP status code. Not validated until written to a response.
        title: Short human-readable summary of the problem type.
        type: URI identifying the problem type, ``about:blank`` when unset.
        detail: Explanation specific to this occurrence.
        instance: URI identifying this occurrence.
        additional: Extension members, emitted flat after the core fields.
    """

    status: int
    title: str
    type: Optional[str] = None
    detail: Optional[str] = None
    instance: Optional[str] = None
    additional: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "additional", MappingProxyType(dict(self.additional))
        )

    @classmethod
    def create(cls, status: int, title: str) -> "ProblemDetails":
        """Create a problem with only status and title set."""
        return cls(status=status, title=title)

    @classmethod
    def from_exception(
        cls, exc: BaseException, include_trace: bool = False
    ) -> "ProblemDetails":
        """Derive a problem from a caught error.

        The status is 500 unless the error has the HasStatusCode
        capability. The title is the status reason phrase and the
        detail is the error message.

        Args:
            exc: The caught error.
            include_trace: Attach ``trace``, ``file`` and ``line``.
        """
        status = reported_status_code(exc)
        if status is None:
            status = DEFAULT_STATUS

        problem = cls.create(status, status_text(status)).with_detail(str(exc))

        if include_trace:
            file, line = error_location(exc)
            problem = (
                problem.with_additional("trace", format_trace(exc))
                .with_additional("file", file)
                .with_additional("line", line)
            )

        return problem

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProblemDetails":
        """Rebuild a problem from its wire mapping.

        Keys other than the core members become extension members.

        Raises:
            SerializationError: If ``status`` or ``title`` is missing.
        """
        missing = [key for key in ("status", "title") if key not in data]
        if missing:
            raise SerializationError(
                f"Problem document is missing: {', '.join(missing)}"
            )

        return cls(
            status=data["status"],
            title=data["title"],
            type=data.get("type"),
            detail=data.get("detail"),
            instance=data.get("instance"),
            additional={
                key: value for key, value in data.items() if key not in CORE_FIELDS
            },
        )

    @classmethod
    def from_json(cls, text: str) -> "ProblemDetails":
        """Parse a problem from ``application/problem+json`` text."""
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SerializationError(f"Invalid problem JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise SerializationError("Problem JSON must be an object")
        return cls.from_dict(data)

    def with_type(self, type: str) -> "ProblemDetails":
        return replace(self, type=type)

    def with_detail(self, detail: str) -> "ProblemDetails":
        return replace(self, detail=detail)

    def with_instance(self, instance: str) -> "ProblemDetails":
        return replace(self, instance=instance)

    def with_additional(self, key: str, value: Any) -> "ProblemDetails":
        """Return a copy with one extension member added or replaced."""
        return replace(self, additional={**self.additional, key: value})

    def to_dict(self) -> dict[str, Any]:
        """Return the wire mapping in RFC 7807 member order.

        ``detail`` and ``instance`` are left out entirely when unset.
        Extension members follow in insertion order and overwrite core
        members with the same key.
        """
        data: dict[str, Any] = {
            "type": self.type if self.type is not None else ABOUT_BLANK,
            "title": self.title,
            "status": self.status,
        }

        if self.detail is not None:
            data["detail"] = self.detail

        if self.instance is not None:
            data["instance"] = self.instance

        data.update(self.additional)
        return data

    def to_json(self) -> str:
        """Serialize to compact JSON.

        Raises:
            SerializationError: If an extension member is not JSON encodable
                (including NaN and infinite floats).
        """
        try:
            return json.dumps(
                self.to_dict(),
                ensure_ascii=False,
                allow_nan=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Problem is not JSON serializable: {exc}") from exc

    def to_response(self, response: Response) -> Response:
        """Write this problem onto a response.

        Replaces the body and sets the status code, ``Content-Type`` and
        ``Content-Length``. The same response object is returned.

        Raises:
            SerializationError: If the body cannot be encoded.
            ResponseConstructionError: If the status is outside 100-599 or
                the response does not accept the body or headers.
        """
        if not isinstance(self.status, int) or not MIN_STATUS <= self.status <= MAX_STATUS:
            raise ResponseConstructionError(
                f"Invalid HTTP status code: {self.status}"
            )

        body = self.to_json().encode("utf-8")

        try:
            response.status_code = self.status
            response.body = body
            response.headers["content-type"] = PROBLEM_MEDIA_TYPE
            response.headers["content-length"] = str(len(body))
        except (AttributeError, TypeError) as exc:
            raise ResponseConstructionError(
                f"Response does not accept a problem body: {exc}"
            ) from exc

        return response
