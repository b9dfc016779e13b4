r"""Shared request and response logic for sync and async executors.

This module contains the steps of a logical call that do not depend on
the concurrency model: building and serializing the request, checking
the status code of the response and decoding the account it carries.
"""

from __future__ import annotations

__all__ = [
    "ACCEPTED_STATUS",
    "build_request",
    "check_response",
    "parse_account",
    "serialize_body",
]

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from accountclient.exceptions import SerializationError
from accountclient.models import Account, AccountResponse
from accountclient.utils.response import decode_json_body, normalize_response_error

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "Content-Type"
JSON_CONTENT_TYPE = "application/json"

# Expected success status code of each operation
ACCEPTED_STATUS = {"fetch": 200, "create": 201, "delete": 204}


def serialize_body(body: Any) -> bytes:
    """Serialize a request body to JSON.

    Args:
        body: The JSON-compatible value to serialize.

    Returns:
        The UTF-8 encoded JSON document.

    Raises:
        SerializationError: If the value cannot be encoded.

    Example:
        ```pycon
        >>> from accountclient.core.http_logic import serialize_body
        >>> serialize_body({"data": {"id": "42"}})
        b'{"data": {"id": "42"}}'

        ```
    """
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        msg = f"an error happened while trying to serialize: {exc}"
        raise SerializationError(msg) from exc


def build_request(
    method: str,
    base_url: str,
    *segments: str,
    body: Any = None,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.Request:
    r"""Build the request of a logical call.

    Path segments are percent-encoded. A JSON content type is only set
    when there is a body.

    Args:
        method: The HTTP method.
        base_url: The URL of the account collection.
        *segments: Path segments appended to the base URL.
        body: Optional JSON-compatible body.
        params: Optional query parameters.
        headers: Optional extra headers.

    Returns:
        The request, ready to be dispatched.

    Raises:
        SerializationError: If the body cannot be serialized.

    Example:
        ```pycon
        >>> from accountclient.core.http_logic import build_request
        >>> request = build_request(
        ...     "DELETE", "http://localhost:8080/v1/organisation/accounts", "42", params={"version": 0}
        ... )
        >>> str(request.url)
        'http://localhost:8080/v1/organisation/accounts/42?version=0'

        ```
    """
    url = "/".join([base_url, *(quote(segment, safe="") for segment in segments)])
    request_headers = dict(headers or {})
    content = None
    if body is not None:
        content = serialize_body(body)
        request_headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE
    return httpx.Request(method, url, params=params, headers=request_headers, content=content)


def check_response(response: httpx.Response, expected_status: int) -> httpx.Response:
    """Check the status code of a fully read response.

    Args:
        response: The response, with its body already read.
        expected_status: The success status code of the operation.

    Returns:
        The response, when its status code is the expected one.

    Raises:
        RequestError: If the status code is not the expected one.
        UnmarshalError: If the error body is not valid JSON.
    """
    if response.status_code != expected_status:
        logger.debug(f"Received status {response.status_code}, expected {expected_status}")
        raise normalize_response_error(response)
    return response


def parse_account(response: httpx.Response) -> Account:
    """Decode the account carried by a fetch or create response.

    Args:
        response: The successful response, with its body already read.

    Returns:
        The account.

    Raises:
        UnmarshalError: If the body is not a valid account document.
    """
    return AccountResponse.from_dict(decode_json_body(response.content)).account
