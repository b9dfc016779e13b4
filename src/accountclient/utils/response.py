r"""HTTP response handling utilities.

This module provides the functions that decode JSON response bodies and
turn non-success responses into ``RequestError``.
"""

from __future__ import annotations

__all__ = ["decode_json_body", "normalize_response_error"]

import json
import logging
from typing import TYPE_CHECKING, Any

from accountclient.exceptions import (
    RECORD_NOT_FOUND_MESSAGE,
    RequestError,
    UnmarshalError,
)

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)

# Header line the API puts in front of the validation messages of a 400
VALIDATION_HEADER = "validation failure list:"


def decode_json_body(content: bytes) -> dict[str, Any]:
    """Decode a JSON object from a response body.

    An empty body decodes to an empty dictionary.

    Args:
        content: The raw response body.

    Returns:
        The decoded JSON object.

    Raises:
        UnmarshalError: If the body is not valid JSON or is not a JSON
            object.

    Example:
        ```pycon
        >>> from accountclient.utils import decode_json_body
        >>> decode_json_body(b'{"error_message": "boom"}')
        {'error_message': 'boom'}
        >>> decode_json_body(b"")
        {}

        ```
    """
    if not content:
        return {}
    try:
        data = json.loads(content)
    except ValueError as exc:
        msg = f"invalid unmarshal JSON value: {exc}"
        raise UnmarshalError(msg) from exc
    if not isinstance(data, dict):
        msg = f"invalid unmarshal JSON value: expected an object, got {type(data).__name__}"
        raise UnmarshalError(msg)
    return data


def normalize_validation_message(message: str) -> str:
    r"""Normalize the message of a 400 response.

    The validation header lines are dropped and every remaining line is
    terminated with a semicolon.

    Args:
        message: The ``error_message`` sent by the server.

    Returns:
        The normalized message.

    Example:
        ```pycon
        >>> from accountclient.utils.response import normalize_validation_message
        >>> normalize_validation_message("validation failure list:\ncountry in body is required")
        'country in body is required;'

        ```
    """
    return "".join(
        f"{line};" for line in message.split("\n") if line.casefold() != VALIDATION_HEADER
    )


def normalize_response_error(response: httpx.Response) -> RequestError:
    r"""Turn a non-success response into a ``RequestError``.

    The response body must already be read. The message depends on the
    status code:

    - 400: validation messages joined by ``normalize_validation_message``
    - 404: always ``record does not exist.``
    - other: the ``error_message`` sent by the server

    Args:
        response: The non-success HTTP response.

    Returns:
        The normalized error.

    Raises:
        UnmarshalError: If the body is not a JSON object. This takes
            precedence over the status code.

    Example:
        ```pycon
        >>> import httpx
        >>> from accountclient.utils import normalize_response_error
        >>> response = httpx.Response(404, json={"error_message": "record 42 does not exist"})
        >>> normalize_response_error(response)
        RequestError(status_code=404, message='record does not exist.')

        ```
    """
    body = decode_json_body(response.content)
    message = body.get("error_message", "")
    if not isinstance(message, str):
        msg = f"invalid unmarshal JSON value: error_message is a {type(message).__name__}"
        raise UnmarshalError(msg)

    if response.status_code == 400:
        message = normalize_validation_message(message)
    elif response.status_code == 404:
        message = RECORD_NOT_FOUND_MESSAGE

    logger.debug(f"Request failed with status {response.status_code}: {message}")
    return RequestError(status_code=response.status_code, message=message)
