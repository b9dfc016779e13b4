r"""Parameter validation utilities for the client configuration.

This module provides validation functions for the configuration values
to ensure they meet the required constraints before the client sends any
request.
"""

from __future__ import annotations

__all__ = ["validate_base_url", "validate_retry_params", "validate_timeout"]

import httpx


def validate_timeout(timeout: float | None) -> None:
    """Validate the deadline of a logical call.

    Args:
        timeout: Maximum seconds allowed for a logical call, including
            every retry and backoff wait. ``None`` means no deadline.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from accountclient.core.validation import validate_timeout
        >>> validate_timeout(2.0)
        >>> validate_timeout(None)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(max_attempts: int, base_interval_ms: int, max_jitter_ms: int) -> None:
    """Validate retry parameters.

    A zero value is valid for every parameter: it disables the retries.

    Args:
        max_attempts: Total number of attempts, including the first one.
            Must be >= 0.
        base_interval_ms: Base backoff interval in milliseconds.
            Must be >= 0.
        max_jitter_ms: Upper bound of the backoff jitter in milliseconds.
            Must be >= 0.

    Raises:
        ValueError: If one of the parameters is negative.

    Example:
        ```pycon
        >>> from accountclient.core.validation import validate_retry_params
        >>> validate_retry_params(max_attempts=3, base_interval_ms=250, max_jitter_ms=50)
        >>> validate_retry_params(max_attempts=0, base_interval_ms=0, max_jitter_ms=0)
        >>> validate_retry_params(max_attempts=-1, base_interval_ms=250, max_jitter_ms=50)  # doctest: +SKIP

        ```
    """
    if max_attempts < 0:
        msg = f"max_attempts must be >= 0, got {max_attempts}"
        raise ValueError(msg)
    if base_interval_ms < 0:
        msg = f"base_interval_ms must be >= 0, got {base_interval_ms}"
        raise ValueError(msg)
    if max_jitter_ms < 0:
        msg = f"max_jitter_ms must be >= 0, got {max_jitter_ms}"
        raise ValueError(msg)


def validate_base_url(base_url: str) -> None:
    """Validate the base URL of the account resource.

    Args:
        base_url: The absolute URL of the account collection.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL.

    Example:
        ```pycon
        >>> from accountclient.core.validation import validate_base_url
        >>> validate_base_url("http://localhost:8080/v1/organisation/accounts")

        ```
    """
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        msg = f"base_url is not a valid URL: {base_url!r}"
        raise ValueError(msg) from exc
    if url.scheme not in {"http", "https"} or not url.host:
        msg = f"base_url must be an absolute http(s) URL, got {base_url!r}"
        raise ValueError(msg)
