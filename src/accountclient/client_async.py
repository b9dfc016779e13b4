r"""Asynchronous client of the account resource."""

from __future__ import annotations

__all__ = ["AsyncAccountClient"]

import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.core.config import ClientConfig
from accountclient.dispatch import BaseAsyncDispatcher, build_async_dispatcher
from accountclient.executor_async import AsyncRequestExecutor
from accountclient.utils.structured_logging import log_structured, logical_call

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from accountclient.models import Account, AccountRequest

logger: logging.Logger = logging.getLogger(__name__)


class AsyncAccountClient:
    r"""Asynchronous client of the account resource.

    Same behavior as ``AccountClient``, with coroutines. The deadline of
    each operation bounds all its attempts and backoff waits; cancelling
    the awaiting task cancels the call.

    Args:
        config: Optional client configuration. If ``None``, the default
            ``ClientConfig`` is used. ``config.dispatcher`` must be a
            ``BaseAsyncDispatcher`` when set.
        client: Optional ``httpx.AsyncClient``. If ``None``, a new client
            is created and closed with the ``AsyncAccountClient``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from accountclient import AsyncAccountClient
        >>> async def main():
        ...     async with AsyncAccountClient() as client:
        ...         return await client.fetch("ad27e265-9605-4b4b-a0e5-3003ea9cc4dc")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        if self._config.dispatcher is not None and not isinstance(
            self._config.dispatcher, BaseAsyncDispatcher
        ):
            msg = (
                "config.dispatcher must be a BaseAsyncDispatcher, "
                f"got {type(self._config.dispatcher).__name__}"
            )
            raise TypeError(msg)
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient()
        self._executor = AsyncRequestExecutor(
            dispatcher=build_async_dispatcher(
                self._config.dispatcher or self._client, self._config.retry
            ),
            base_url=self._config.base_url,
            headers=self._config.headers,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(executor={self._executor!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        """The configuration of the client."""
        return self._config

    async def aclose(self) -> None:
        """Close the underlying ``httpx.AsyncClient`` if the client
        created it."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, account_id: str, *, timeout: float | None = None) -> Account:
        """Fetch one account.

        Args:
            account_id: The identifier of the account.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.

        Returns:
            The account.
        """
        with logical_call("fetch"):
            log_structured(logger, logging.DEBUG, "Fetching account", account_id=account_id)
            return await self._executor.fetch(account_id, self._timeout(timeout))

    async def create(self, account: AccountRequest, *, timeout: float | None = None) -> Account:
        """Create one account.

        Args:
            account: The account to create.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.

        Returns:
            The account created by the server.
        """
        with logical_call("create"):
            log_structured(logger, logging.DEBUG, "Creating account", account_id=account.id)
            return await self._executor.create(account, self._timeout(timeout))

    async def delete(
        self, account_id: str, version: int = 0, *, timeout: float | None = None
    ) -> None:
        """Delete one account.

        Args:
            account_id: The identifier of the account.
            version: The version of the account to delete.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.
        """
        with logical_call("delete"):
            log_structured(
                logger, logging.DEBUG, "Deleting account", account_id=account_id, version=version
            )
            await self._executor.delete(account_id, version, self._timeout(timeout))

    def _timeout(self, timeout: float | None) -> float | None:
        return self._config.timeout if timeout is None else timeout
