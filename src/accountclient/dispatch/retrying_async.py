r"""Asynchronous retrying dispatcher applying exponential backoff on
transport failures."""

from __future__ import annotations

__all__ = ["AsyncRetryingDispatcher"]

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.backoff import ExponentialBackoff
from accountclient.dispatch.base import BaseAsyncDispatcher
from accountclient.exceptions import RequestTimeoutError, RetryLimitExceededError
from accountclient.utils.exceptions import normalize_dispatch_error

if TYPE_CHECKING:
    from accountclient.core.config import RetryConfig
    from accountclient.core.deadline import Deadline

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryingDispatcher(BaseAsyncDispatcher):
    """Decorate an async dispatcher with retries on transport failures.

    Same policy as ``RetryingDispatcher``: responses are returned
    whatever their status, timeouts are not retried, other transport
    errors are retried with exponential backoff until the attempts are
    exhausted. The backoff uses ``asyncio.sleep``, so cancelling the task
    interrupts the wait immediately. A backoff longer than the time left
    on the deadline is not started: the ``RequestTimeoutError`` is raised
    at once with the last ``httpx`` error as ``__cause__``.

    Args:
        dispatcher: The dispatcher executing each attempt.
        config: The retry configuration.
    """

    def __init__(self, dispatcher: BaseAsyncDispatcher, config: RetryConfig) -> None:
        self._dispatcher = dispatcher
        self.config = config
        self.backoff: ExponentialBackoff | None = (
            ExponentialBackoff(config.base_interval_ms, config.max_jitter_ms)
            if config.enabled
            else None
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(dispatcher={self._dispatcher!r}, config={self.config!r})"

    async def execute(
        self, request: httpx.Request, deadline: Deadline | None = None
    ) -> httpx.Response:
        if self.backoff is None:
            return await self._dispatcher.execute(request, deadline)

        max_attempts = self.config.max_attempts
        last_error: httpx.TransportError | None = None

        for attempt in range(max_attempts):
            try:
                return await self._dispatcher.execute(request, deadline)
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

            if attempt + 1 < max_attempts:
                delay = self.backoff.calculate(attempt)
                if deadline is not None:
                    try:
                        deadline.check_wait(delay)
                    except RequestTimeoutError as exc:
                        raise exc from last_error
                await asyncio.sleep(delay)

        logger.debug(
            f"{request.method} request to {request.url} failed after {max_attempts} attempts"
        )
        raise RetryLimitExceededError(
            attempts=max_attempts, last_error=normalize_dispatch_error(last_error)
        ) from last_error
