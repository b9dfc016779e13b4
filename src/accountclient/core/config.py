r"""Configuration dataclasses and defaults for the account client.

The configuration is built once, validated on construction and never
mutated afterwards. ``merge`` returns a modified copy.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_BASE_INTERVAL_MS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_JITTER_MS",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "RetryConfig",
]

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from accountclient.core.validation import (
    validate_base_url,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from accountclient.dispatch.base import BaseAsyncDispatcher, BaseDispatcher


# Default URL of the account collection
DEFAULT_BASE_URL = "http://localhost:8080/v1/organisation/accounts"

# Default deadline in seconds of a logical call, retries included. It
# leaves room for the default backoff (at most 2.4s) and a second attempt
DEFAULT_TIMEOUT = 10.0

# Default retry policy: 2 attempts in total, first retry after
# 2250ms plus up to 150ms of jitter
DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_BASE_INTERVAL_MS = 2250
DEFAULT_MAX_JITTER_MS = 150


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy applied to transport failures.

    Setting any parameter to 0 disables the retries: the request is sent
    once and its transport error is raised as-is.

    Args:
        max_attempts: Total number of attempts, including the first one.
        base_interval_ms: Base backoff interval in milliseconds. The wait
            before retry ``n`` (0-indexed) is ``base_interval_ms * 2 ** n``
            plus the jitter.
        max_jitter_ms: Exclusive upper bound of the random jitter added to
            each wait, in milliseconds.

    Example:
        ```pycon
        >>> from accountclient.core.config import RetryConfig
        >>> RetryConfig().enabled
        True
        >>> RetryConfig(max_attempts=3, base_interval_ms=0, max_jitter_ms=10).enabled
        False

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_interval_ms: int = DEFAULT_BASE_INTERVAL_MS
    max_jitter_ms: int = DEFAULT_MAX_JITTER_MS

    def __post_init__(self) -> None:
        validate_retry_params(
            max_attempts=self.max_attempts,
            base_interval_ms=self.base_interval_ms,
            max_jitter_ms=self.max_jitter_ms,
        )

    @property
    def enabled(self) -> bool:
        """Indicate if more than one attempt may be made."""
        return self.max_attempts > 1 and self.base_interval_ms > 0 and self.max_jitter_ms > 0


@dataclass(frozen=True)
class ClientConfig:
    """Configuration of an ``AccountClient``.

    Args:
        base_url: URL of the account collection.
        timeout: Deadline in seconds of a logical call, including every
            retry and backoff wait. ``None`` disables the deadline.
        retry: Retry policy for transport failures. ``None`` disables
            the retries.
        dispatcher: Optional dispatcher replacing the HTTP transport
            entirely, e.g. a stub in tests. When set, ``retry`` still
            wraps it.
        headers: Extra headers sent with every request.

    Example:
        ```pycon
        >>> from accountclient.core.config import ClientConfig, RetryConfig
        >>> config = ClientConfig()
        >>> config.timeout
        10.0
        >>> config.retry
        RetryConfig(max_attempts=2, base_interval_ms=2250, max_jitter_ms=150)
        >>> config.merge(timeout=5.0).timeout
        5.0
        >>> config.timeout  # Original unchanged
        10.0

        ```
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT
    retry: RetryConfig | None = field(default_factory=RetryConfig)
    dispatcher: BaseDispatcher | BaseAsyncDispatcher | None = None
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        validate_base_url(self.base_url)
        validate_timeout(self.timeout)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
