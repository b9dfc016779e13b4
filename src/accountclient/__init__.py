r"""accountclient - Resilient client library for the account resource.

This package provides a client for the account resource (fetch, create
and delete) built on top of the httpx library. Requests go through a
pluggable dispatcher: a direct one, or a retrying decorator applying an
exponential backoff with jitter on transport failures. Every failure is
normalized into a small typed error taxonomy.

Key Features:
    - Fetch, create and delete operations with JSON payloads
    - Retries with exponential backoff and jitter on transport failures
    - A deadline bounding each logical call, retries and waits included
    - Cancellation of an in-flight call from another thread or task
    - Normalized ``RequestError`` for every non-success HTTP response
    - Swappable dispatcher, e.g. a stub in tests
    - Synchronous and asynchronous clients

Example:
    ```pycon
    >>> from accountclient import AccountClient, ClientConfig, RetryConfig
    >>> config = ClientConfig(
    ...     timeout=5.0,
    ...     retry=RetryConfig(max_attempts=3, base_interval_ms=250, max_jitter_ms=100),
    ... )
    >>> with AccountClient(config=config) as client:  # doctest: +SKIP
    ...     account = client.fetch("ad27e265-9605-4b4b-a0e5-3003ea9cc4dc")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "Account",
    "AccountAttributes",
    "AccountClient",
    "AccountClientError",
    "AccountRequest",
    "AsyncAccountClient",
    "ClientConfig",
    "MissingRequiredFieldError",
    "RequestCancelledError",
    "RequestError",
    "RequestTimeoutError",
    "RetryConfig",
    "RetryLimitExceededError",
    "SerializationError",
    "TransportFailureError",
    "UnmarshalError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from accountclient.client import AccountClient
from accountclient.client_async import AsyncAccountClient
from accountclient.core.config import ClientConfig, RetryConfig
from accountclient.exceptions import (
    AccountClientError,
    MissingRequiredFieldError,
    RequestCancelledError,
    RequestError,
    RequestTimeoutError,
    RetryLimitExceededError,
    SerializationError,
    TransportFailureError,
    UnmarshalError,
)
from accountclient.models import Account, AccountAttributes, AccountRequest

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
