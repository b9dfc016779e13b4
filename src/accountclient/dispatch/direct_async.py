r"""Direct dispatcher sending requests through an ``httpx.AsyncClient``."""

from __future__ import annotations

__all__ = ["AsyncDirectDispatcher"]

import logging
from typing import TYPE_CHECKING

from accountclient.dispatch.base import BaseAsyncDispatcher

if TYPE_CHECKING:
    import httpx

    from accountclient.core.deadline import Deadline

logger: logging.Logger = logging.getLogger(__name__)


class AsyncDirectDispatcher(BaseAsyncDispatcher):
    """Send each request once, without any retry.

    Transport errors raised by ``httpx`` propagate unchanged. No request
    is sent once the deadline passed or the call was cancelled.

    Args:
        client: The ``httpx.AsyncClient`` used to send the requests. The
            dispatcher does not close it.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    async def execute(
        self, request: httpx.Request, deadline: Deadline | None = None
    ) -> httpx.Response:
        if deadline is not None:
            deadline.check()
        logger.debug(f"Sending {request.method} request to {request.url}")
        return await self._client.send(request)
