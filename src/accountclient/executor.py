r"""Synchronous request executor of the account operations.

The executor validates the inputs, builds the request, hands it to the
configured dispatcher and normalizes whatever comes back into either a
result or one error of the taxonomy.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.core.http_logic import (
    ACCEPTED_STATUS,
    build_request,
    check_response,
    parse_account,
)
from accountclient.utils import normalize_dispatch_error, validate_required_field

if TYPE_CHECKING:
    from collections.abc import Mapping

    from accountclient.core.deadline import Deadline
    from accountclient.dispatch.base import BaseDispatcher
    from accountclient.models import Account, AccountRequest

logger: logging.Logger = logging.getLogger(__name__)


class RequestExecutor:
    r"""Execute the fetch, create and delete operations.

    Args:
        dispatcher: The dispatcher sending the requests.
        base_url: The URL of the account collection.
        headers: Optional extra headers sent with every request.

    Example:
        ```pycon
        >>> import httpx
        >>> from accountclient.dispatch import DirectDispatcher
        >>> from accountclient.executor import RequestExecutor
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(204))
        >>> executor = RequestExecutor(
        ...     DirectDispatcher(httpx.Client(transport=transport)),
        ...     base_url="http://localhost:8080/v1/organisation/accounts",
        ... )
        >>> executor.delete("ad27e265-9605-4b4b-a0e5-3003ea9cc4dc")

        ```
    """

    def __init__(
        self,
        dispatcher: BaseDispatcher,
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

    def fetch(self, account_id: str, deadline: Deadline | None = None) -> Account:
        """Fetch one account.

        Args:
            account_id: The identifier of the account.
            deadline: Optional deadline of the call.

        Returns:
            The account.

        Raises:
            MissingRequiredFieldError: If ``account_id`` is blank.
            RequestError: If the server answers with a status other than 200.
            AccountClientError: For any other failure of the taxonomy.
        """
        account_id = validate_required_field(account_id, "account_id")
        request = build_request("GET", self._base_url, account_id, headers=self._headers)
        response = self._send(request, ACCEPTED_STATUS["fetch"], deadline)
        return parse_account(response)

    def create(self, account: AccountRequest, deadline: Deadline | None = None) -> Account:
        """Create one account.

        Args:
            account: The account to create.
            deadline: Optional deadline of the call.

        Returns:
            The account created by the server.

        Raises:
            SerializationError: If the payload cannot be encoded.
            RequestError: If the server answers with a status other than 201.
            AccountClientError: For any other failure of the taxonomy.
        """
        request = build_request(
            "POST", self._base_url, body=account.to_payload(), headers=self._headers
        )
        response = self._send(request, ACCEPTED_STATUS["create"], deadline)
        return parse_account(response)

    def delete(self, account_id: str, version: int = 0, deadline: Deadline | None = None) -> None:
        """Delete one account.

        Args:
            account_id: The identifier of the account.
            version: The version of the account to delete.
            deadline: Optional deadline of the call.

        Raises:
            MissingRequiredFieldError: If ``account_id`` is blank.
            RequestError: If the server answers with a status other than 204.
            AccountClientError: For any other failure of the taxonomy.
        """
        account_id = validate_required_field(account_id, "account_id")
        request = build_request(
            "DELETE",
            self._base_url,
            account_id,
            params={"version": version},
            headers=self._headers,
        )
        self._send(request, ACCEPTED_STATUS["delete"], deadline)

    def _send(
        self, request: httpx.Request, expected_status: int, deadline: Deadline | None
    ) -> httpx.Response:
        """Dispatch a request and return its fully read response.

        The response is closed before returning or raising.
        """
        logger.debug(f"Executing {request.method} request to {request.url}")
        try:
            response = self._dispatcher.execute(request, deadline)
        except httpx.TransportError as exc:
            raise normalize_dispatch_error(exc) from exc

        try:
            response.read()
        except httpx.TransportError as exc:
            raise normalize_dispatch_error(exc) from exc
        finally:
            response.close()
        return check_response(response, expected_status)
