r"""Define the exceptions raised by the account client.

Every failure surfaced to the caller is an ``AccountClientError``
subclass. Local precondition failures, transport failures, timeouts and
HTTP-level failures are distinct classes so callers can tell them apart
with ``isinstance`` or ``pytest.raises``.
"""

from __future__ import annotations

__all__ = [
    "AccountClientError",
    "MissingRequiredFieldError",
    "RECORD_NOT_FOUND_MESSAGE",
    "RequestCancelledError",
    "RequestError",
    "RequestTimeoutError",
    "RetryLimitExceededError",
    "SerializationError",
    "TransportFailureError",
    "UnmarshalError",
]

from typing import Any

# Message used for every 404 response, whatever the server sent
RECORD_NOT_FOUND_MESSAGE = "record does not exist."


class AccountClientError(Exception):
    """Base class of all the errors raised by the account client."""


class MissingRequiredFieldError(AccountClientError):
    """Raised when a required input is missing or contains only blanks.

    This is a local precondition failure: no request is sent and it is
    never retried.

    Args:
        field: The name of the missing field.

    Example:
        ```pycon
        >>> from accountclient.exceptions import MissingRequiredFieldError
        >>> error = MissingRequiredFieldError("account_id")
        >>> error.field
        'account_id'
        >>> str(error)
        "an 'account_id' must be provided and can't contain only blanks."

        ```
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"an {field!r} must be provided and can't contain only blanks.")
        self.field = field


class SerializationError(AccountClientError):
    """Raised when a request body cannot be encoded to JSON."""


class UnmarshalError(AccountClientError):
    """Raised when a response body is not the expected JSON value."""


class TransportFailureError(AccountClientError):
    """Raised when the request could not be sent or answered.

    The original ``httpx`` exception is available as ``__cause__``.
    """


class RequestTimeoutError(AccountClientError):
    """Raised when the deadline of a logical call is exceeded."""


class RequestCancelledError(RequestTimeoutError):
    """Raised when a logical call is cancelled by the caller."""


class RetryLimitExceededError(AccountClientError):
    r"""Raised when every attempt allowed by the retry configuration
    failed.

    Args:
        attempts: The number of attempts that were made.
        last_error: The normalized error of the last attempt.

    Example:
        ```pycon
        >>> from accountclient.exceptions import (
        ...     RetryLimitExceededError,
        ...     TransportFailureError,
        ... )
        >>> error = RetryLimitExceededError(3, TransportFailureError("connection refused"))
        >>> error.attempts
        3
        >>> str(error)
        'unable to execute request, retry attempts reached (3 attempts): connection refused'

        ```
    """

    def __init__(self, attempts: int, last_error: AccountClientError) -> None:
        super().__init__(
            f"unable to execute request, retry attempts reached ({attempts} attempts): "
            f"{last_error}"
        )
        self.attempts = attempts
        self.last_error = last_error


class RequestError(AccountClientError):
    r"""Raised when the server answers with an unexpected status code.

    Two ``RequestError`` are equal when they have the same status code and
    message, which makes them convenient to compare in tests.

    Args:
        status_code: The HTTP status code of the response.
        message: The normalized error message.

    Example:
        ```pycon
        >>> from accountclient.exceptions import RequestError
        >>> error = RequestError(404, "record does not exist.")
        >>> str(error)
        "status:404, error:'record does not exist.'."
        >>> error == RequestError(404, "record does not exist.")
        True

        ```
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"status:{status_code}, error:'{message}'.")
        self.status_code = status_code
        self.message = message

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RequestError):
            return NotImplemented
        return self.status_code == other.status_code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.status_code, self.message))

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(status_code={self.status_code}, message={self.message!r})"
