r"""Dispatchers executing requests against the transport.

Public API:
    - BaseDispatcher / BaseAsyncDispatcher: dispatcher interfaces
    - DirectDispatcher / AsyncDirectDispatcher: single attempt through httpx
    - RetryingDispatcher / AsyncRetryingDispatcher: retry decorators
    - build_dispatcher / build_async_dispatcher: compose the dispatcher of
      a client configuration
"""

from __future__ import annotations

__all__ = [
    "AsyncDirectDispatcher",
    "AsyncRetryingDispatcher",
    "BaseAsyncDispatcher",
    "BaseDispatcher",
    "DirectDispatcher",
    "RetryingDispatcher",
    "build_async_dispatcher",
    "build_dispatcher",
]

from typing import TYPE_CHECKING

from accountclient.dispatch.base import BaseAsyncDispatcher, BaseDispatcher
from accountclient.dispatch.direct import DirectDispatcher
from accountclient.dispatch.direct_async import AsyncDirectDispatcher
from accountclient.dispatch.retrying import RetryingDispatcher
from accountclient.dispatch.retrying_async import AsyncRetryingDispatcher

if TYPE_CHECKING:
    import httpx

    from accountclient.core.config import RetryConfig


def build_dispatcher(base: BaseDispatcher | httpx.Client, retry: RetryConfig | None) -> BaseDispatcher:
    r"""Compose the synchronous dispatcher of a client.

    Args:
        base: A dispatcher, or the ``httpx.Client`` of a direct dispatcher.
        retry: The retry configuration. ``None`` or a disabled
            configuration keeps a single attempt.

    Returns:
        The dispatcher, wrapped in a ``RetryingDispatcher`` when the
        retries are enabled.
    """
    dispatcher = base if isinstance(base, BaseDispatcher) else DirectDispatcher(base)
    if retry is None or not retry.enabled:
        return dispatcher
    return RetryingDispatcher(dispatcher, retry)


def build_async_dispatcher(
    base: BaseAsyncDispatcher | httpx.AsyncClient, retry: RetryConfig | None
) -> BaseAsyncDispatcher:
    r"""Compose the asynchronous dispatcher of a client.

    Args:
        base: A dispatcher, or the ``httpx.AsyncClient`` of a direct
            dispatcher.
        retry: The retry configuration. ``None`` or a disabled
            configuration keeps a single attempt.

    Returns:
        The dispatcher, wrapped in an ``AsyncRetryingDispatcher`` when the
        retries are enabled.
    """
    dispatcher = base if isinstance(base, BaseAsyncDispatcher) else AsyncDirectDispatcher(base)
    if retry is None or not retry.enabled:
        return dispatcher
    return AsyncRetryingDispatcher(dispatcher, retry)
