r"""Asynchronous request executor of the account operations.

The deadline of a logical call bounds every attempt and backoff wait of
the dispatcher: it is enforced with ``asyncio.wait_for``, which cancels
the pending network call or sleep as soon as the deadline passes. The
dispatcher also receives the ``Deadline`` so it never starts a backoff
wait that would outlast it.
"""

from __future__ import annotations

__all__ = ["AsyncRequestExecutor"]

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.core.deadline import Deadline
from accountclient.core.http_logic import (
    ACCEPTED_STATUS,
    build_request,
    check_response,
    parse_account,
)
from accountclient.exceptions import RequestTimeoutError
from accountclient.utils import normalize_dispatch_error, validate_required_field

if TYPE_CHECKING:
    from collections.abc import Mapping

    from accountclient.dispatch.base import BaseAsyncDispatcher
    from accountclient.models import Account, AccountRequest

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRequestExecutor:
    """Execute the fetch, create and delete operations asynchronously.

    Args:
        dispatcher: The async dispatcher sending the requests.
        base_url: The URL of the account collection.
        headers: Optional extra headers sent with every request.
    """

    def __init__(
        self,
        dispatcher: BaseAsyncDispatcher,
        base_url: str,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._base_url = base_url.rstrip("/")
        self._headers = dict(headers or {})

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(dispatcher={self._dispatcher!r}, "
            f"base_url={self._base_url!r})"
        )

    async def fetch(self, account_id: str, timeout: float | None = None) -> Account:
        """Fetch one account.

        Args:
            account_id: The identifier of the account.
            timeout: Optional deadline of the call in seconds.

        Returns:
            The account.
        """
        account_id = validate_required_field(account_id, "account_id")
        request = build_request("GET", self._base_url, account_id, headers=self._headers)
        response = await self._send(request, ACCEPTED_STATUS["fetch"], timeout)
        return parse_account(response)

    async def create(self, account: AccountRequest, timeout: float | None = None) -> Account:
        """Create one account.

        Args:
            account: The account to create.
            timeout: Optional deadline of the call in seconds.

        Returns:
            The account created by the server.
        """
        request = build_request(
            "POST", self._base_url, body=account.to_payload(), headers=self._headers
        )
        response = await self._send(request, ACCEPTED_STATUS["create"], timeout)
        return parse_account(response)

    async def delete(self, account_id: str, version: int = 0, timeout: float | None = None) -> None:
        """Delete one account.

        Args:
            account_id: The identifier of the account.
            version: The version of the account to delete.
            timeout: Optional deadline of the call in seconds.
        """
        account_id = validate_required_field(account_id, "account_id")
        request = build_request(
            "DELETE",
            self._base_url,
            account_id,
            params={"version": version},
            headers=self._headers,
        )
        await self._send(request, ACCEPTED_STATUS["delete"], timeout)

    async def _send(
        self, request: httpx.Request, expected_status: int, timeout: float | None
    ) -> httpx.Response:
        deadline = Deadline(timeout=timeout)
        logger.debug(f"Executing {request.method} request to {request.url}")
        try:
            response = await asyncio.wait_for(self._dispatch(request, deadline), timeout)
        except asyncio.TimeoutError as exc:
            msg = f"request cancelled due to deadline exceeded ({timeout}s)"
            raise RequestTimeoutError(msg) from exc
        except httpx.TransportError as exc:
            raise normalize_dispatch_error(exc) from exc
        return check_response(response, expected_status)

    async def _dispatch(self, request: httpx.Request, deadline: Deadline) -> httpx.Response:
        response = await self._dispatcher.execute(request, deadline)
        try:
            await response.aread()
        finally:
            await response.aclose()
        return response
