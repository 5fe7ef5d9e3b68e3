"""
Logging configuration for Problem Details error reporting.

Intercepted errors are reported to the ``problem_details`` logger with
their context passed as ``extra`` record attributes, never with request
bodies. ``configure_logging`` attaches one handler to that logger only;
the host application's root logger is left alone.
Logging must not change program behavior.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(request_method)s %(request_uri)s | %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ERROR_LOGGER_NAME = "problem_details"
HANDLER_NAME = "problem_details.stream"

# Records logged outside a request have no request context
_RECORD_DEFAULTS = {"request_method": "-", "request_uri": "-"}


def configure_logging(
    level: str = "INFO", stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach a stream handler to the error logger.

    Calling it again replaces the handler installed by the previous call,
    so reconfiguring never duplicates output.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
            Unknown names fall back to INFO.
        stream: Where records are written. Defaults to stdout.

    Returns:
        The configured error logger.
    """
    logger = get_error_logger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT, defaults=_RECORD_DEFAULTS)
    )
    logger.addHandler(handler)
    return logger


def get_error_logger() -> logging.Logger:
    """Return the logger intercepted errors are reported to."""
    return logging.getLogger(ERROR_LOGGER_NAME)
