r"""Shared test helpers for the account client tests.

This module contains the sample account documents and a scripted
``httpx.MockTransport`` handler used across the unit tests.
"""

from __future__ import annotations

__all__ = [
    "ACCOUNT_ID",
    "BASE_URL",
    "ORGANISATION_ID",
    "ScriptedHandler",
    "account_document",
    "error_response",
    "scripted_async_client",
    "scripted_client",
]

from typing import Any

import httpx

BASE_URL = "http://localhost:8080/v1/organisation/accounts"
ACCOUNT_ID = "ad27e265-9605-4b4b-a0e5-3003ea9cc4dc"
ORGANISATION_ID = "eb0bd6f5-c3f5-44b2-b677-acd23cdde73c"


def account_document(**overrides: Any) -> dict[str, Any]:
    """Create the JSON body of a fetch or create response.

    Args:
        **overrides: Fields of the account replacing the defaults.

    Returns:
        The response body.
    """
    data = {
        "id": ACCOUNT_ID,
        "organisation_id": ORGANISATION_ID,
        "type": "accounts",
        "version": 0,
        "created_on": "2021-03-01T10:00:00.000Z",
        "modified_on": "2021-03-01T10:00:00.000Z",
        "attributes": {
            "country": "GB",
            "base_currency": "GBP",
            "bank_id": "400300",
            "bank_id_code": "GBDSC",
            "bic": "NWBKGB22",
            "name": ["Jane Doe"],
        },
    }
    data.update(overrides)
    return {"data": data, "links": {"self": f"/v1/organisation/accounts/{data['id']}"}}


def error_response(status_code: int, message: str) -> httpx.Response:
    """Create an error response carrying ``error_message``."""
    return httpx.Response(status_code, json={"error_message": message})


class ScriptedHandler:
    r"""Handler of an ``httpx.MockTransport`` replaying scripted outcomes.

    Each outcome is either an ``httpx.Response``, returned as a fresh
    copy, or an exception, raised. The last outcome is replayed once the
    script is exhausted.

    Args:
        *outcomes: The outcomes of the successive requests.
    """

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        if not outcomes:
            msg = "at least one outcome is required"
            raise ValueError(msg)
        self._outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        """The number of requests received."""
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(
            outcome.status_code, headers=outcome.headers, content=outcome.content
        )


def scripted_client(handler: ScriptedHandler) -> httpx.Client:
    """Create an ``httpx.Client`` served by a scripted handler."""
    return httpx.Client(transport=httpx.MockTransport(handler))


def scripted_async_client(handler: ScriptedHandler) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` served by a scripted handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
