r"""Deadline and cancellation of a logical call.

A ``Deadline`` bounds one logical call (fetch, create or delete) as a
whole: every transport attempt and every backoff wait draws from the
same time budget. It also carries the cancellation signal of the call.
"""

from __future__ import annotations

__all__ = ["Deadline"]

import logging
import threading
import time

from accountclient.core.validation import validate_timeout
from accountclient.exceptions import RequestCancelledError, RequestTimeoutError

logger: logging.Logger = logging.getLogger(__name__)


class Deadline:
    r"""Time budget and cancellation signal of a logical call.

    Args:
        timeout: Maximum number of seconds for the whole logical call.
            ``None`` means no time limit.
        cancel_event: Optional ``threading.Event``. Setting it from another
            thread cancels the call and interrupts any backoff wait.

    Example:
        ```pycon
        >>> from accountclient.core.deadline import Deadline
        >>> deadline = Deadline(timeout=2.0)
        >>> deadline.expired
        False
        >>> 0 < deadline.remaining() <= 2.0
        True
        >>> Deadline().remaining() is None
        True

        ```
    """

    def __init__(
        self,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        validate_timeout(timeout)
        self.timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(timeout={self.timeout}, remaining={self.remaining()})"

    @property
    def cancelled(self) -> bool:
        """Indicate if the logical call was cancelled."""
        return self._cancel_event.is_set()

    @property
    def expired(self) -> bool:
        """Indicate if the time budget is exhausted."""
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self) -> None:
        """Cancel the logical call."""
        self._cancel_event.set()

    def remaining(self) -> float | None:
        """Return the number of seconds left, or ``None`` without
        limit."""
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    def check(self) -> None:
        """Raise if the call was cancelled or its deadline passed.

        Raises:
            RequestCancelledError: If the call was cancelled.
            RequestTimeoutError: If the deadline passed.
        """
        if self.cancelled:
            msg = "request cancelled by the caller"
            raise RequestCancelledError(msg)
        if self.expired:
            msg = f"request cancelled due to deadline exceeded ({self.timeout}s)"
            raise RequestTimeoutError(msg)

    def check_wait(self, seconds: float) -> None:
        """Raise if a wait of ``seconds`` cannot end before the deadline.

        Args:
            seconds: The number of seconds of the wait.

        Raises:
            RequestCancelledError: If the call was cancelled.
            RequestTimeoutError: If the deadline passed, or would pass
                before the end of the wait.
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and seconds >= remaining:
            logger.debug(
                f"Backoff of {seconds:.3f}s exceeds the remaining budget of {remaining:.3f}s"
            )
            msg = (
                f"request cancelled due to deadline exceeded ({self.timeout}s): backoff of "
                f"{seconds:.3f}s exceeds the remaining {remaining:.3f}s"
            )
            raise RequestTimeoutError(msg)

    def wait(self, seconds: float) -> None:
        """Block for ``seconds`` unless the call is cancelled first.

        A wait that would outlast the deadline raises immediately instead
        of sleeping until the deadline.

        Args:
            seconds: The number of seconds to wait.

        Raises:
            RequestCancelledError: If the call is cancelled before or
                during the wait.
            RequestTimeoutError: If the deadline passes before the end of
                the wait.
        """
        self.check_wait(seconds)
        self._cancel_event.wait(seconds)
        self.check()
