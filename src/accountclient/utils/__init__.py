r"""Utility functions for request validation, response handling and error
normalization.

This package provides the helpers used by the request executors to
validate inputs, decode JSON bodies, and normalize transport failures
and non-success responses into the client error taxonomy.
"""

from __future__ import annotations

__all__ = [
    "decode_json_body",
    "normalize_dispatch_error",
    "normalize_response_error",
    "validate_required_field",
]

from accountclient.utils.exceptions import normalize_dispatch_error
from accountclient.utils.response import decode_json_body, normalize_response_error
from accountclient.utils.validation import validate_required_field
