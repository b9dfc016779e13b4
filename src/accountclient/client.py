r"""Synchronous client of the account resource.

This module provides the ``AccountClient``, which wires an immutable
``ClientConfig`` into a dispatcher and a request executor, and exposes
the fetch, create and delete operations.
"""

from __future__ import annotations

__all__ = ["AccountClient"]

import logging
from typing import TYPE_CHECKING

import httpx

from accountclient.core.config import ClientConfig
from accountclient.core.deadline import Deadline
from accountclient.dispatch import BaseDispatcher, build_dispatcher
from accountclient.executor import RequestExecutor
from accountclient.utils.structured_logging import log_structured, logical_call

if TYPE_CHECKING:
    import threading
    from types import TracebackType
    from typing import Self

    from accountclient.models import Account, AccountRequest

logger: logging.Logger = logging.getLogger(__name__)


class AccountClient:
    r"""Synchronous client of the account resource.

    The client is configured once with a ``ClientConfig``. The dispatcher
    is a ``DirectDispatcher`` over an ``httpx.Client``, or the dispatcher
    of ``config.dispatcher`` when set, wrapped in a ``RetryingDispatcher``
    when the retries are enabled. The client holds no per-call state and
    can be shared between threads.

    Every operation is bounded by a deadline (``config.timeout`` unless
    overridden per call) covering all its attempts and backoff waits, and
    accepts a ``threading.Event`` to cancel it from another thread. The
    event interrupts backoff waits immediately. A network attempt already
    in flight is only bounded by its httpx timeout, derived from the time
    left on the deadline.

    Args:
        config: Optional client configuration. If ``None``, the default
            ``ClientConfig`` is used.
        client: Optional ``httpx.Client``. If ``None``, a new client is
            created and closed with the ``AccountClient``. A client passed
            in is never closed by the ``AccountClient``.

    Example:
        ```pycon
        >>> from accountclient import AccountClient, ClientConfig
        >>> with AccountClient(config=ClientConfig(timeout=5.0)) as client:  # doctest: +SKIP
        ...     account = client.fetch("ad27e265-9605-4b4b-a0e5-3003ea9cc4dc")
        ...

        ```
    """

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        if self._config.dispatcher is not None and not isinstance(
            self._config.dispatcher, BaseDispatcher
        ):
            msg = (
                "config.dispatcher must be a BaseDispatcher, "
                f"got {type(self._config.dispatcher).__name__}"
            )
            raise TypeError(msg)
        self._owns_client = client is None
        self._client: httpx.Client = client or httpx.Client()
        self._executor = RequestExecutor(
            dispatcher=build_dispatcher(
                self._config.dispatcher or self._client, self._config.retry
            ),
            base_url=self._config.base_url,
            headers=self._config.headers,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(executor={self._executor!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        """The configuration of the client."""
        return self._config

    def close(self) -> None:
        """Close the underlying ``httpx.Client`` if the client created
        it."""
        if self._owns_client:
            self._client.close()

    def fetch(
        self,
        account_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Account:
        r"""Fetch one account.

        Args:
            account_id: The identifier of the account.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.
            cancel_event: Optional event cancelling the call when set. It
                stops a backoff wait at once and prevents further
                attempts, but cannot abort a network read already in
                progress: that attempt ends at the latest when the
                deadline passes, through its httpx timeout.

        Returns:
            The account.

        Raises:
            MissingRequiredFieldError: If ``account_id`` is blank.
            RequestError: If the server answers with a status other than 200.
            RequestTimeoutError: If the deadline passes or the call is
                cancelled.
            RetryLimitExceededError: If every attempt failed.
            TransportFailureError: If the request could not be sent.
            UnmarshalError: If a response body is not the expected JSON.
        """
        with logical_call("fetch"):
            log_structured(logger, logging.DEBUG, "Fetching account", account_id=account_id)
            return self._executor.fetch(account_id, self._deadline(timeout, cancel_event))

    def create(
        self,
        account: AccountRequest,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Account:
        r"""Create one account.

        Args:
            account: The account to create.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.
            cancel_event: Optional event cancelling the call when set. It
                stops a backoff wait at once and prevents further
                attempts, but cannot abort a network read already in
                progress: that attempt ends at the latest when the
                deadline passes, through its httpx timeout.

        Returns:
            The account created by the server.

        Raises:
            SerializationError: If the payload cannot be encoded.
            RequestError: If the server answers with a status other than 201.
            AccountClientError: For any other failure of the taxonomy.
        """
        with logical_call("create"):
            log_structured(logger, logging.DEBUG, "Creating account", account_id=account.id)
            return self._executor.create(account, self._deadline(timeout, cancel_event))

    def delete(
        self,
        account_id: str,
        version: int = 0,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        r"""Delete one account.

        Args:
            account_id: The identifier of the account.
            version: The version of the account to delete.
            timeout: Deadline of the call in seconds. If ``None``,
                ``config.timeout`` is used.
            cancel_event: Optional event cancelling the call when set. It
                stops a backoff wait at once and prevents further
                attempts, but cannot abort a network read already in
                progress: that attempt ends at the latest when the
                deadline passes, through its httpx timeout.

        Raises:
            MissingRequiredFieldError: If ``account_id`` is blank.
            RequestError: If the server answers with a status other than 204.
            AccountClientError: For any other failure of the taxonomy.
        """
        with logical_call("delete"):
            log_structured(
                logger, logging.DEBUG, "Deleting account", account_id=account_id, version=version
            )
            self._executor.delete(account_id, version, self._deadline(timeout, cancel_event))

    def _deadline(self, timeout: float | None, cancel_event: threading.Event | None) -> Deadline:
        if timeout is None:
            timeout = self._config.timeout
        return Deadline(timeout=timeout, cancel_event=cancel_event)
