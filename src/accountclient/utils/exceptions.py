r"""Exception normalization utilities.

This module maps the failures raised while dispatching a request onto
the account client error taxonomy.
"""

from __future__ import annotations

__all__ = ["normalize_dispatch_error"]

import logging

import httpx

from accountclient.exceptions import (
    AccountClientError,
    RequestTimeoutError,
    TransportFailureError,
)

logger: logging.Logger = logging.getLogger(__name__)


def normalize_dispatch_error(exc: Exception) -> AccountClientError:
    """Convert a dispatch failure into an account client error.

    The classification only looks at the raised exception:

    - errors of the taxonomy (e.g. ``RetryLimitExceededError``,
      ``RequestCancelledError``) are returned unchanged
    - ``httpx.TimeoutException`` becomes ``RequestTimeoutError``
    - any other exception becomes ``TransportFailureError``

    The caller is expected to raise the returned error ``from exc`` so the
    original exception stays available as ``__cause__``.

    Args:
        exc: The exception raised by the dispatcher.

    Returns:
        The normalized error.

    Example:
        ```pycon
        >>> import httpx
        >>> from accountclient.utils import normalize_dispatch_error
        >>> normalize_dispatch_error(httpx.ReadTimeout("timed out"))
        RequestTimeoutError('request cancelled due to timeout: timed out')
        >>> normalize_dispatch_error(httpx.ConnectError("connection refused"))
        TransportFailureError('client dispatcher error (ConnectError): connection refused')

        ```
    """
    if isinstance(exc, AccountClientError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        logger.debug(f"Dispatch timed out: {exc}")
        return RequestTimeoutError(f"request cancelled due to timeout: {exc}")
    logger.debug(f"Dispatch failed with {type(exc).__name__}: {exc}")
    return TransportFailureError(f"client dispatcher error ({type(exc).__name__}): {exc}")
