r"""Configuration, validation and deadline handling shared by the sync
and async clients."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "Deadline",
    "RetryConfig",
    "validate_base_url",
    "validate_retry_params",
    "validate_timeout",
]

from accountclient.core.config import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ClientConfig,
    RetryConfig,
)
from accountclient.core.deadline import Deadline
from accountclient.core.validation import (
    validate_base_url,
    validate_retry_params,
    validate_timeout,
)
