r"""Unit tests for the synchronous retrying dispatcher.

The backoff waits are patched with the ``mock_wait`` fixture, except in
the tests of the deadline and the cancellation.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from accountclient.backoff import ExponentialBackoff
from accountclient.core import Deadline, RetryConfig
from accountclient.dispatch import (
    BaseDispatcher,
    DirectDispatcher,
    RetryingDispatcher,
    build_dispatcher,
)
from accountclient.exceptions import (
    RequestCancelledError,
    RequestTimeoutError,
    RetryLimitExceededError,
    TransportFailureError,
)
from tests.helpers import ScriptedHandler, scripted_client

if TYPE_CHECKING:
    from collections.abc import Generator

RETRY_CONFIG = RetryConfig(max_attempts=3, base_interval_ms=100, max_jitter_ms=10)


@pytest.fixture
def client() -> Generator[httpx.Client, None, None]:
    with httpx.Client() as client:
        yield client


########################################
#     Tests for RetryingDispatcher     #
########################################


def test_retrying_dispatcher_repr() -> None:
    dispatcher = RetryingDispatcher(Mock(spec=BaseDispatcher), RETRY_CONFIG)
    assert repr(dispatcher).startswith("RetryingDispatcher(dispatcher=")


def test_retrying_dispatcher_backoff() -> None:
    dispatcher = RetryingDispatcher(Mock(spec=BaseDispatcher), RETRY_CONFIG)
    assert isinstance(dispatcher.backoff, ExponentialBackoff)
    assert dispatcher.backoff.base_interval_ms == 100
    assert dispatcher.backoff.max_jitter_ms == 10


def test_retrying_dispatcher_success_first_attempt(
    request_get: httpx.Request, mock_wait: Mock
) -> None:
    handler = ScriptedHandler(httpx.Response(200))
    with scripted_client(handler) as client:
        response = RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG).execute(request_get)
    assert response.status_code == 200
    assert handler.call_count == 1
    mock_wait.assert_not_called()


@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_retrying_dispatcher_does_not_retry_status(
    request_get: httpx.Request, mock_wait: Mock, status_code: int
) -> None:
    """Test that error statuses are returned without any retry."""
    handler = ScriptedHandler(httpx.Response(status_code))
    with scripted_client(handler) as client:
        response = RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG).execute(request_get)
    assert response.status_code == status_code
    assert handler.call_count == 1
    mock_wait.assert_not_called()


@pytest.mark.parametrize("failures", [1, 2])
def test_retrying_dispatcher_recovers(
    request_get: httpx.Request, mock_wait: Mock, failures: int
) -> None:
    """Test that k transport failures followed by a success take k + 1
    calls."""
    handler = ScriptedHandler(
        *[httpx.ConnectError("connection refused")] * failures, httpx.Response(200)
    )
    with scripted_client(handler) as client:
        response = RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG).execute(request_get)
    assert response.status_code == 200
    assert handler.call_count == failures + 1
    assert mock_wait.call_count == failures


@pytest.mark.parametrize("max_attempts", [2, 3, 5])
def test_retrying_dispatcher_retry_limit(
    request_get: httpx.Request, mock_wait: Mock, max_attempts: int
) -> None:
    """Test that exactly max_attempts calls are made before giving up."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    config = RetryConfig(max_attempts=max_attempts, base_interval_ms=100, max_jitter_ms=10)
    with scripted_client(handler) as client, pytest.raises(
        RetryLimitExceededError,
        match=rf"retry attempts reached \({max_attempts} attempts\): "
        r"client dispatcher error \(ConnectError\): connection refused",
    ) as exc_info:
        RetryingDispatcher(DirectDispatcher(client), config).execute(request_get)

    assert handler.call_count == max_attempts
    assert mock_wait.call_count == max_attempts - 1
    error = exc_info.value
    assert error.attempts == max_attempts
    assert isinstance(error.last_error, TransportFailureError)
    assert isinstance(error.__cause__, httpx.ConnectError)


def test_retrying_dispatcher_backoff_delays(request_get: httpx.Request, mock_wait: Mock) -> None:
    """Test that the waits grow exponentially, starting from the base
    interval."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    config = RetryConfig(max_attempts=4, base_interval_ms=100, max_jitter_ms=10)
    with scripted_client(handler) as client, pytest.raises(RetryLimitExceededError):
        RetryingDispatcher(DirectDispatcher(client), config).execute(request_get)

    delays = [call.args[0] for call in mock_wait.call_args_list]
    assert len(delays) == 3
    for attempt, delay in enumerate(delays):
        assert 0.1 * 2**attempt <= delay < (100 * 2**attempt + 10) / 1000


def test_retrying_dispatcher_does_not_retry_timeout(
    request_get: httpx.Request, mock_wait: Mock
) -> None:
    """Test that a timeout is raised without any retry."""
    handler = ScriptedHandler(httpx.ReadTimeout("timed out"), httpx.Response(200))
    with scripted_client(handler) as client, pytest.raises(httpx.ReadTimeout):
        RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG).execute(request_get)
    assert handler.call_count == 1
    mock_wait.assert_not_called()


def test_retrying_dispatcher_timeout_after_failure(
    request_get: httpx.Request, mock_wait: Mock
) -> None:
    handler = ScriptedHandler(
        httpx.ConnectError("connection refused"), httpx.ConnectTimeout("timed out")
    )
    with scripted_client(handler) as client, pytest.raises(httpx.ConnectTimeout):
        RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG).execute(request_get)
    assert handler.call_count == 2


def test_retrying_dispatcher_single_attempt_config(
    request_get: httpx.Request, mock_wait: Mock
) -> None:
    """Test that a disabled configuration makes a single attempt and
    raises the raw error."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    config = RetryConfig(max_attempts=1, base_interval_ms=100, max_jitter_ms=10)
    dispatcher = RetryingDispatcher(DirectDispatcher(httpx.Client()), config)
    assert dispatcher.backoff is None
    with scripted_client(handler) as client, pytest.raises(httpx.ConnectError):
        RetryingDispatcher(DirectDispatcher(client), config).execute(request_get)
    assert handler.call_count == 1
    mock_wait.assert_not_called()


def test_retrying_dispatcher_passes_deadline(request_get: httpx.Request) -> None:
    """Test that every attempt receives the deadline of the call."""
    inner = Mock(spec=BaseDispatcher)
    inner.execute.return_value = httpx.Response(200)
    deadline = Deadline(timeout=5.0)
    RetryingDispatcher(inner, RETRY_CONFIG).execute(request_get, deadline)
    inner.execute.assert_called_once_with(request_get, deadline)


def test_retrying_dispatcher_deadline_stops_backoff(request_get: httpx.Request) -> None:
    """Test that a backoff outlasting the deadline raises at once, with
    the last transport failure as cause."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    config = RetryConfig(max_attempts=3, base_interval_ms=5000, max_jitter_ms=10)
    start = time.monotonic()
    with scripted_client(handler) as client, pytest.raises(
        RequestTimeoutError, match=r"deadline exceeded"
    ) as exc_info:
        RetryingDispatcher(DirectDispatcher(client), config).execute(
            request_get, Deadline(timeout=0.1)
        )
    assert time.monotonic() - start < 0.5
    assert handler.call_count == 1
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_retrying_dispatcher_cancel_interrupts_backoff(request_get: httpx.Request) -> None:
    """Test that cancelling from another thread interrupts the backoff
    wait."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    config = RetryConfig(max_attempts=3, base_interval_ms=5000, max_jitter_ms=10)
    event = threading.Event()
    timer = threading.Timer(0.05, event.set)
    timer.start()
    start = time.monotonic()
    try:
        with scripted_client(handler) as client, pytest.raises(RequestCancelledError):
            RetryingDispatcher(DirectDispatcher(client), config).execute(
                request_get, Deadline(timeout=30.0, cancel_event=event)
            )
    finally:
        timer.cancel()
    assert time.monotonic() - start < 2.0
    assert handler.call_count == 1


def test_retrying_dispatcher_shared_between_threads(
    request_get: httpx.Request, mock_wait: Mock
) -> None:
    """Test that concurrent calls keep independent retry counters."""
    handler = ScriptedHandler(httpx.ConnectError("connection refused"))
    errors: list[BaseException] = []

    with scripted_client(handler) as client:
        dispatcher = RetryingDispatcher(DirectDispatcher(client), RETRY_CONFIG)

        def run() -> None:
            try:
                dispatcher.execute(httpx.Request("GET", request_get.url))
            except RetryLimitExceededError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=run) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert len(errors) == 4
    assert all(error.attempts == 3 for error in errors)
    assert handler.call_count == 12


######################################
#     Tests for build_dispatcher     #
######################################


def test_build_dispatcher_retry_enabled(client: httpx.Client) -> None:
    dispatcher = build_dispatcher(client, RETRY_CONFIG)
    assert isinstance(dispatcher, RetryingDispatcher)
    assert dispatcher.config == RETRY_CONFIG


@pytest.mark.parametrize(
    "retry", [None, RetryConfig(max_attempts=1), RetryConfig(max_jitter_ms=0)]
)
def test_build_dispatcher_retry_disabled(client: httpx.Client, retry: RetryConfig | None) -> None:
    assert isinstance(build_dispatcher(client, retry), DirectDispatcher)


def test_build_dispatcher_custom_dispatcher() -> None:
    """Test that a custom dispatcher is wrapped, not replaced."""
    inner = Mock(spec=BaseDispatcher)
    assert build_dispatcher(inner, None) is inner
    dispatcher = build_dispatcher(inner, RETRY_CONFIG)
    assert isinstance(dispatcher, RetryingDispatcher)
    assert dispatcher._dispatcher is inner
