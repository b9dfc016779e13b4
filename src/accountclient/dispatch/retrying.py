r"""Retrying dispatcher applying exponential backoff on transport
failures.

This module provides the decorator that adds retries to any synchronous
dispatcher.
"""

from __future__ import annotations

__all__ = ["RetryingDispatcher"]

import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.backoff import ExponentialBackoff
from accountclient.core.deadline import Deadline
from accountclient.dispatch.base import BaseDispatcher
from accountclient.exceptions import RequestTimeoutError, RetryLimitExceededError
from accountclient.utils.exceptions import normalize_dispatch_error

if TYPE_CHECKING:
    from accountclient.core.config import RetryConfig

logger: logging.Logger = logging.getLogger(__name__)


class RetryingDispatcher(BaseDispatcher):
    r"""Decorate a dispatcher with retries on transport failures.

    The retry loop handles:

    - Any response, whatever its status code: returned immediately
    - Timeouts (``httpx.TimeoutException``): raised immediately, without
      retry, because a retry would rarely finish before the deadline of
      the caller
    - Other transport errors (``httpx.TransportError``): retried after an
      exponential backoff with jitter, while attempts remain
    - Exhausted attempts: ``RetryLimitExceededError`` wrapping the
      normalized last failure, with the ``httpx`` error as ``__cause__``
    - Backoff outlasting the deadline: the ``RequestTimeoutError`` of the
      deadline is raised at once, with the last ``httpx`` error as
      ``__cause__``

    When the retry configuration is disabled, the request is dispatched
    once and its error is raised unchanged.

    The retry state lives in the local variables of ``execute``, so one
    instance can be shared by concurrent callers.

    Args:
        dispatcher: The dispatcher executing each attempt.
        config: The retry configuration.

    Example:
        ```pycon
        >>> import httpx
        >>> from accountclient.core import RetryConfig
        >>> from accountclient.dispatch import DirectDispatcher, RetryingDispatcher
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200))
        >>> dispatcher = RetryingDispatcher(
        ...     DirectDispatcher(httpx.Client(transport=transport)),
        ...     RetryConfig(max_attempts=3, base_interval_ms=100, max_jitter_ms=50),
        ... )
        >>> dispatcher.execute(httpx.Request("GET", "http://localhost/accounts/42")).status_code
        200

        ```
    """

    def __init__(self, dispatcher: BaseDispatcher, config: RetryConfig) -> None:
        self._dispatcher = dispatcher
        self.config = config
        self.backoff: ExponentialBackoff | None = (
            ExponentialBackoff(config.base_interval_ms, config.max_jitter_ms)
            if config.enabled
            else None
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(dispatcher={self._dispatcher!r}, config={self.config!r})"

    def execute(self, request: httpx.Request, deadline: Deadline | None = None) -> httpx.Response:
        if self.backoff is None:
            return self._dispatcher.execute(request, deadline)

        if deadline is None:
            deadline = Deadline()
        max_attempts = self.config.max_attempts
        last_error: httpx.TransportError | None = None

        for attempt in range(max_attempts):
            try:
                response = self._dispatcher.execute(request, deadline)
            except httpx.TimeoutException:
                logger.debug(
                    f"{request.method} request to {request.url} timed out on attempt "
                    f"{attempt + 1}/{max_attempts}, not retrying"
                )
                raise
            except httpx.TransportError as exc:
                last_error = exc
                logger.debug(
                    f"{request.method} request to {request.url} encountered "
                    f"{type(exc).__name__} on attempt {attempt + 1}/{max_attempts}: {exc}"
                )
            else:
                if attempt > 0:
                    logger.debug(
                        f"{request.method} request to {request.url} succeeded on attempt "
                        f"{attempt + 1}/{max_attempts}"
                    )
                return response

            if attempt + 1 < max_attempts:
                try:
                    deadline.wait(self.backoff.calculate(attempt))
                except RequestTimeoutError as exc:
                    raise exc from last_error

        logger.debug(
            f"{request.method} request to {request.url} failed after {max_attempts} attempts"
        )
        raise RetryLimitExceededError(
            attempts=max_attempts, last_error=normalize_dispatch_error(last_error)
        ) from last_error
