"""
Tests for the error diagnostic helpers.

Covers type identifiers, source locations, cause resolution and the
cause chain walk including its cycle and depth guards.
"""

import pytest

from problem_details.domain.exception_info import (
    error_code,
    error_location,
    format_exception_chain,
    format_trace,
    previous_exception,
    type_identifier,
)
from problem_details.domain.problem import ProblemDetails


class _GatewayError(Exception):
    """Top-level error used to build cause chains."""


def _chain(*messages: str) -> Exception:
    """Raise a chain of errors; the first message is the outermost error."""
    try:
        try:
            try:
                raise ConnectionError(messages[2])
            except ConnectionError as exc:
                raise TimeoutError(messages[1]) from exc
        except TimeoutError as exc:
            raise _GatewayError(messages[0]) from exc
    except _GatewayError as caught:
        return caught


class TestTypeIdentifier:
    """Tests for type_identifier."""

    def test_builtin_uses_bare_name(self) -> None:
        assert type_identifier(ValueError) == "ValueError"

    def test_other_classes_are_module_qualified(self) -> None:
        assert (
            type_identifier(ProblemDetails)
            == "problem_details.domain.problem.ProblemDetails"
        )

    def test_nested_class_uses_qualname(self) -> None:
        class Inner(Exception):
            pass

        assert type_identifier(Inner).endswith(
            "test_nested_class_uses_qualname.<locals>.Inner"
        )


class TestErrorLocation:
    """Tests for error_location and format_trace."""

    def test_raised_error_points_at_raise(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            file, line = error_location(exc)
            trace = format_trace(exc)

        assert file.endswith("test_exception_info.py")
        assert isinstance(line, int)
        assert 'raise RuntimeError("boom")' in trace

    def test_unraised_error_has_no_location(self) -> None:
        assert error_location(RuntimeError("boom")) == (None, None)


class TestErrorCode:
    """Tests for error_code."""

    def test_os_error_uses_errno(self) -> None:
        assert error_code(FileNotFoundError(2, "No such file")) == 2

    def test_code_attribute(self) -> None:
        assert error_code(SystemExit(3)) == 3

    def test_plain_error_has_no_code(self) -> None:
        assert error_code(ValueError("bad")) is None


class TestPreviousException:
    """Tests for cause resolution."""

    def test_explicit_cause(self) -> None:
        cause = ValueError("cause")
        try:
            raise RuntimeError("outer") from cause
        except RuntimeError as exc:
            assert previous_exception(exc) is cause

    def test_implicit_context(self) -> None:
        try:
            try:
                raise ValueError("inner")
            except ValueError:
                raise RuntimeError("outer")
        except RuntimeError as exc:
            assert isinstance(previous_exception(exc), ValueError)

    def test_suppressed_context(self) -> None:
        try:
            try:
                raise ValueError("inner")
            except ValueError:
                raise RuntimeError("outer") from None
        except RuntimeError as exc:
            assert previous_exception(exc) is None


class TestFormatExceptionChain:
    """Tests for format_exception_chain."""

    def test_no_cause(self) -> None:
        assert format_exception_chain(RuntimeError("alone")) is None

    def test_nested_chain(self) -> None:
        chain = format_exception_chain(_chain("A", "B", "C"))

        assert chain["class"] == "TimeoutError"
        assert chain["message"] == "B"
        assert chain["file"].endswith("test_exception_info.py")
        assert isinstance(chain["line"], int)
        assert chain["previous"]["class"] == "ConnectionError"
        assert chain["previous"]["message"] == "C"
        assert "previous" not in chain["previous"]
        assert "truncated" not in chain["previous"]

    def test_cycle_is_truncated(self) -> None:
        first = RuntimeError("first")
        second = ValueError("second")
        first.__cause__ = second
        second.__cause__ = first

        assert format_exception_chain(first) == {
            "class": "ValueError",
            "message": "second",
            "file": None,
            "line": None,
            "truncated": True,
        }

    def test_self_cycle_below_top(self) -> None:
        top = RuntimeError("top")
        looping = ValueError("loop")
        top.__cause__ = looping
        looping.__cause__ = looping

        chain = format_exception_chain(top)

        assert chain["message"] == "loop"
        assert chain["truncated"] is True

    @pytest.mark.parametrize("max_depth", [1, 2, 3])
    def test_depth_cap(self, max_depth: int) -> None:
        errors = [RuntimeError(f"e{i}") for i in range(6)]
        for outer, inner in zip(errors, errors[1:]):
            outer.__cause__ = inner

        chain = format_exception_chain(errors[0], max_depth=max_depth)

        emitted = 1
        while "previous" in chain:
            chain = chain["previous"]
            emitted += 1
        assert emitted == max_depth
        assert chain["truncated"] is True
