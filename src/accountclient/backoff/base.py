r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long the retrying dispatcher waits
    after a failed transport attempt before trying again.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given retry.

        Args:
            attempt: The retry number (0-indexed). For example,
                attempt=0 is the wait before the first retry, attempt=1
                the wait before the second retry, etc.

        Returns:
            The delay in seconds before the next attempt.
        """
