r"""Backoff policy used between retry attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff", "calculate_delay"]

from accountclient.backoff.base import BaseBackoffStrategy
from accountclient.backoff.exponential import ExponentialBackoff, calculate_delay
