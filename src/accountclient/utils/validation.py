r"""Input validation utilities for the account operations."""

from __future__ import annotations

__all__ = ["validate_required_field"]

from accountclient.exceptions import MissingRequiredFieldError


def validate_required_field(value: str | None, field: str) -> str:
    """Check that a required field is not blank.

    Args:
        value: The value to check.
        field: The field name, used in the error.

    Returns:
        The value with its surrounding whitespace removed.

    Raises:
        MissingRequiredFieldError: If the value is ``None`` or contains
            only whitespace.

    Example:
        ```pycon
        >>> from accountclient.utils import validate_required_field
        >>> validate_required_field(" 42 ", "account_id")
        '42'
        >>> validate_required_field("   ", "account_id")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        accountclient.exceptions.MissingRequiredFieldError: an 'account_id' must be provided ...

        ```
    """
    if value is None or not value.strip():
        raise MissingRequiredFieldError(field)
    return value.strip()
