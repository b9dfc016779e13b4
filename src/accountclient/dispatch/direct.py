r"""Direct dispatcher sending requests through an ``httpx.Client``."""

from __future__ import annotations

__all__ = ["DirectDispatcher"]

import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.dispatch.base import BaseDispatcher

if TYPE_CHECKING:
    from accountclient.core.deadline import Deadline

logger: logging.Logger = logging.getLogger(__name__)


class DirectDispatcher(BaseDispatcher):
    r"""Send each request once, without any retry.

    Transport errors raised by ``httpx`` propagate unchanged. When a
    deadline is given, the timeout of the attempt is the time left on the
    deadline, and no request is sent once the deadline passed or the call
    was cancelled.

    Args:
        client: The ``httpx.Client`` used to send the requests. The
            dispatcher does not close it.

    Example:
        ```pycon
        >>> import httpx
        >>> from accountclient.dispatch import DirectDispatcher
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(204))
        >>> dispatcher = DirectDispatcher(httpx.Client(transport=transport))
        >>> dispatcher.execute(httpx.Request("DELETE", "http://localhost/accounts/42")).status_code
        204

        ```
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def execute(self, request: httpx.Request, deadline: Deadline | None = None) -> httpx.Response:
        if deadline is not None:
            deadline.check()
            remaining = deadline.remaining()
            if remaining is not None:
                request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()
        logger.debug(f"Sending {request.method} request to {request.url}")
        return self._client.send(request)
