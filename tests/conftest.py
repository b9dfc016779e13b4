from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from accountclient.core.deadline import Deadline
from accountclient.models import AccountAttributes, AccountRequest
from tests.helpers import ACCOUNT_ID, ORGANISATION_ID

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_wait() -> Generator[Mock, None, None]:
    """Patch Deadline.wait to make the backoff waits instant."""
    with patch.object(Deadline, "wait", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def account_request() -> AccountRequest:
    """Create the payload of an account creation."""
    return AccountRequest(
        id=ACCOUNT_ID,
        organisation_id=ORGANISATION_ID,
        attributes=AccountAttributes(
            country="GB",
            name=("Jane Doe",),
            base_currency="GBP",
            bank_id="400300",
            bank_id_code="GBDSC",
            bic="NWBKGB22",
        ),
    )


@pytest.fixture
def request_get() -> httpx.Request:
    """Create a fetch request."""
    return httpx.Request("GET", f"http://localhost:8080/v1/organisation/accounts/{ACCOUNT_ID}")
