"""
Diagnostic details extracted from caught errors.

Used for log context and for the development-mode fields of a
problem response: type identity, source location, stack trace and
the chain of errors that led to the caught one.
"""

import traceback
from typing import Any, Optional

MAX_CHAIN_DEPTH = 32


def type_identifier(cls: type) -> str:
    """Return the dotted identifier of an error class.

    Builtin classes use their bare name (``ValueError``), everything else
    is qualified with its module (``myapp.errors.NotFound``).
    """
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def error_location(exc: BaseException) -> tuple[Optional[str], Optional[int]]:
    """Return the file and line where the error was raised.

    Errors that were never raised carry no traceback: (None, None).
    """
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return None, None
    frame = frames[-1]
    return frame.filename, frame.lineno


def format_trace(exc: BaseException) -> str:
    """Render the error's stack trace as text."""
    return "".join(traceback.format_tb(exc.__traceback__))


def error_code(exc: BaseException) -> Any:
    """Return the numeric or symbolic code attached to an error, if any."""
    if isinstance(exc, OSError):
        return exc.errno
    return getattr(exc, "code", None)


def previous_exception(exc: BaseException) -> Optional[BaseException]:
    """Return the error that caused ``exc``.

    An explicit ``raise ... from`` cause wins over the implicit context,
    and a suppressed context (``from None``) counts as no cause.
    """
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def format_exception_chain(
    exc: BaseException, max_depth: int = MAX_CHAIN_DEPTH
) -> Optional[dict[str, Any]]:
    """Describe the chain of errors that led to ``exc``.

    Each link is ``{class, message, file, line}`` with the next one nested
    under ``previous``. The walk stops at an error already visited or after
    ``max_depth`` links; the last link emitted then carries
    ``"truncated": True`` instead of ``previous``.

    Args:
        exc: The caught error.
        max_depth: Maximum number of links to emit.

    Returns:
        The nested description, or None when ``exc`` has no cause.
    """
    previous = previous_exception(exc)
    if previous is None:
        return None
    return _format_link(previous, {id(exc)}, max_depth)


def _format_link(
    exc: BaseException, seen: set[int], remaining: int
) -> dict[str, Any]:
    seen.add(id(exc))
    file, line = error_location(exc)
    data: dict[str, Any] = {
        "class": type_identifier(type(exc)),
        "message": str(exc),
        "file": file,
        "line": line,
    }

    previous = previous_exception(exc)
    if previous is None:
        return data
    if id(previous) in seen or remaining <= 1:
        data["truncated"] = True
        return data

    data["previous"] = _format_link(previous, seen, remaining - 1)
    return data
