r"""Exponential backoff with additive jitter."""

from __future__ import annotations

__all__ = ["ExponentialBackoff", "calculate_delay"]

import logging
import random

from accountclient.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_delay(attempt: int, base_interval_ms: int, max_jitter_ms: int) -> float:
    """Calculate the wait before a retry, in seconds.

    The delay is ``base_interval_ms * 2 ** attempt`` milliseconds plus a
    random jitter drawn uniformly from ``[0, max_jitter_ms)``. The jitter
    keeps concurrent clients from retrying in lockstep.

    Args:
        attempt: The retry number (0-indexed). The initial attempt never
            waits, so attempt=0 is the wait before the first retry.
        base_interval_ms: The base interval in milliseconds. Must be > 0.
        max_jitter_ms: The exclusive upper bound of the random jitter in
            milliseconds. Must be >= 0. A value of 0 disables the jitter.

    Returns:
        The delay in seconds.

    Raises:
        ValueError: If one of the arguments is out of range.

    Example:
        ```pycon
        >>> from accountclient.backoff import calculate_delay
        >>> calculate_delay(attempt=0, base_interval_ms=250, max_jitter_ms=0)
        0.25
        >>> calculate_delay(attempt=2, base_interval_ms=250, max_jitter_ms=0)
        1.0
        >>> 0.5 <= calculate_delay(attempt=1, base_interval_ms=250, max_jitter_ms=100) < 0.6
        True

        ```
    """
    if attempt < 0:
        msg = f"attempt must be >= 0, got {attempt}"
        raise ValueError(msg)
    if base_interval_ms <= 0:
        msg = f"base_interval_ms must be > 0, got {base_interval_ms}"
        raise ValueError(msg)
    if max_jitter_ms < 0:
        msg = f"max_jitter_ms must be >= 0, got {max_jitter_ms}"
        raise ValueError(msg)

    base_ms = base_interval_ms * (2**attempt)
    jitter_ms = random.randrange(max_jitter_ms) if max_jitter_ms > 0 else 0  # noqa: S311
    logger.debug(f"Backoff before retry {attempt + 1}: base={base_ms}ms, jitter={jitter_ms}ms")
    return (base_ms + jitter_ms) / 1000


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with additive jitter.

    Calculates delay as: ``base_interval_ms * (2 ** attempt) + jitter``
    milliseconds, where the jitter is drawn from ``[0, max_jitter_ms)``.

    Args:
        base_interval_ms: The base interval in milliseconds. Must be > 0.
        max_jitter_ms: The exclusive upper bound of the jitter in
            milliseconds. Must be >= 0.

    Example:
        ```pycon
        >>> from accountclient.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_interval_ms=100)
        >>> backoff.calculate(0)
        0.1
        >>> backoff.calculate(3)
        0.8

        ```
    """

    def __init__(self, base_interval_ms: int, max_jitter_ms: int = 0) -> None:
        if base_interval_ms <= 0:
            msg = f"base_interval_ms must be > 0, got {base_interval_ms}"
            raise ValueError(msg)
        if max_jitter_ms < 0:
            msg = f"max_jitter_ms must be >= 0, got {max_jitter_ms}"
            raise ValueError(msg)

        self.base_interval_ms = base_interval_ms
        self.max_jitter_ms = max_jitter_ms

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_interval_ms={self.base_interval_ms}, "
            f"max_jitter_ms={self.max_jitter_ms})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate the exponential backoff delay.

        Args:
            attempt: The retry number (0-indexed).

        Returns:
            The delay in seconds.
        """
        return calculate_delay(
            attempt=attempt,
            base_interval_ms=self.base_interval_ms,
            max_jitter_ms=self.max_jitter_ms,
        )
