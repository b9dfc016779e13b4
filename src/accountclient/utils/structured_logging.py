r"""Structured logging utilities for machine-readable log output.

The account client logs through the standard ``logging`` module. This
module adds an opt-in JSON formatter and a correlation ID shared by all
the records emitted during one logical call, so the attempts and backoff
waits of a call can be grouped by a log aggregator.

Example:
    Enable structured logging for the account client:

    ```python
    import logging
    from accountclient.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("accountclient")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "logical_call",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

# Context variable for correlation ID (thread-safe and async-safe)
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Attributes of every LogRecord, not copied as extra fields
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Get the current correlation ID.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


@contextmanager
def logical_call(operation: str) -> Generator[str, None, None]:
    r"""Run a logical call under its own correlation ID.

    A correlation ID already set by the caller is kept, so a caller can
    tie the client logs to its own request ID. Otherwise a new one is
    generated. The previous value is restored on exit.

    Args:
        operation: The operation name (e.g. ``"fetch"``), used as prefix
            of a generated ID.

    Yields:
        The correlation ID of the call.

    Example:
        ```pycon
        >>> from accountclient.utils.structured_logging import (
        ...     get_correlation_id,
        ...     logical_call,
        ... )
        >>> with logical_call("fetch") as correlation_id:
        ...     correlation_id.startswith("fetch-")
        ...
        True
        >>> get_correlation_id() is None
        True

        ```
    """
    current = _correlation_id.get()
    correlation_id = current if current is not None else f"{operation}-{uuid.uuid4().hex[:12]}"
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as one JSON object with the fields
    ``timestamp``, ``level``, ``logger``, ``message``, ``module``,
    ``function`` and ``line``, plus ``correlation_id`` when set, the
    formatted exception when present, and any field passed through the
    ``extra`` argument of the logging call.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from accountclient.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.warning("Retrying", extra={"attempt": 2})
        >>> json.loads(stream.getvalue())["attempt"]
        2

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format timestamp as ISO 8601 in UTC with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Additional structured fields to include in the record.
    """
    logger.log(level, message, extra=extra)
