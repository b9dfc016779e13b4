r"""Abstract base classes for dispatchers.

A dispatcher executes one request against the transport and returns the
raw response. Dispatchers compose by wrapping: the retrying dispatchers
decorate any other dispatcher.
"""

from __future__ import annotations

__all__ = ["BaseAsyncDispatcher", "BaseDispatcher"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from accountclient.core.deadline import Deadline


class BaseDispatcher(ABC):
    """Abstract base class for synchronous dispatchers.

    A dispatcher holds no state tied to a logical call, so one instance
    can be shared by concurrent callers.
    """

    @abstractmethod
    def execute(self, request: httpx.Request, deadline: Deadline | None = None) -> httpx.Response:
        """Execute a request.

        Any HTTP status code is a successful dispatch: interpreting the
        status code is the job of the caller.

        Args:
            request: The request to send.
            deadline: Optional deadline of the logical call. The
                dispatcher must not outlive it.

        Returns:
            The response of the server.

        Raises:
            httpx.TransportError: If the request could not be sent or
                answered.
            AccountClientError: If the dispatcher gave up, e.g. after
                exhausting its retries or when the call was cancelled.
        """


class BaseAsyncDispatcher(ABC):
    """Abstract base class for asynchronous dispatchers.

    The caller also bounds an async logical call with task cancellation,
    so the deadline is only used to refuse work that cannot finish in
    time, e.g. a backoff wait longer than the remaining budget.
    """

    @abstractmethod
    async def execute(
        self, request: httpx.Request, deadline: Deadline | None = None
    ) -> httpx.Response:
        """Execute a request.

        Args:
            request: The request to send.
            deadline: Optional deadline of the logical call.

        Returns:
            The response of the server.

        Raises:
            httpx.TransportError: If the request could not be sent or
                answered.
            AccountClientError: If the dispatcher gave up.
        """
