"""Reason phrases for HTTP status codes."""

from http import HTTPStatus

UNKNOWN_STATUS_TEXT = "Unknown Status"


def status_text(status: int) -> str:
    """Return the standard reason phrase for a status code."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return UNKNOWN_STATUS_TEXT
