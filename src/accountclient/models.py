r"""Data models of the account resource.

The models are frozen dataclasses converted to and from the JSON wire
format with ``to_dict`` and ``from_dict``.
"""

from __future__ import annotations

__all__ = ["Account", "AccountAttributes", "AccountRequest", "AccountResponse", "Links"]

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from accountclient.exceptions import UnmarshalError

# Attributes always serialized, even when empty
_REQUIRED_ATTRIBUTES = ("country", "name")


def _require(data: Any, key: str, kind: type | tuple[type, ...], model: str) -> Any:
    if not isinstance(data, dict):
        msg = f"invalid unmarshal JSON value: {model} must be an object, got {type(data).__name__}"
        raise UnmarshalError(msg)
    value = data.get(key)
    if not isinstance(value, kind):
        msg = f"invalid unmarshal JSON value: {model}.{key} is missing or has the wrong type"
        raise UnmarshalError(msg)
    return value


def _parse_timestamp(value: Any, key: str) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"invalid unmarshal JSON value: account.{key} must be a string"
        raise UnmarshalError(msg)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        msg = f"invalid unmarshal JSON value: account.{key} is not an ISO-8601 timestamp"
        raise UnmarshalError(msg) from exc


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = f"invalid unmarshal JSON value: attributes.{key} must be a list of strings"
        raise UnmarshalError(msg)
    return tuple(value)


@dataclass(frozen=True)
class AccountAttributes:
    """Attributes of an account.

    Only ``country`` and ``name`` are always serialized; the other
    attributes are omitted while unset.
    """

    country: str
    name: tuple[str, ...] = ()
    alternative_names: tuple[str, ...] = ()
    account_classification: str | None = None
    account_matching_opt_out: bool | None = None
    account_number: str | None = None
    bank_id: str | None = None
    bank_id_code: str | None = None
    base_currency: str | None = None
    bic: str | None = None
    iban: str | None = None
    joint_account: bool | None = None
    secondary_identification: str | None = None
    status: str | None = None
    switched: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, tuple):
                value = list(value)
            if name in _REQUIRED_ATTRIBUTES or value not in (None, []):
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> AccountAttributes:
        if not isinstance(data, dict):
            msg = f"invalid unmarshal JSON value: attributes must be an object, got {type(data).__name__}"
            raise UnmarshalError(msg)
        values = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        values["country"] = values.get("country") or ""
        values["name"] = _string_list(values.get("name"), "name")
        values["alternative_names"] = _string_list(
            values.get("alternative_names"), "alternative_names"
        )
        return cls(**values)


@dataclass(frozen=True)
class AccountRequest:
    r"""Payload of an account creation.

    Example:
        ```pycon
        >>> from accountclient.models import AccountAttributes, AccountRequest
        >>> request = AccountRequest(
        ...     id="ad27e265-9605-4b4b-a0e5-3003ea9cc4dc",
        ...     organisation_id="eb0bd6f5-c3f5-44b2-b677-acd23cdde73c",
        ...     attributes=AccountAttributes(country="GB", name=("Jane Doe",)),
        ... )
        >>> request.to_payload()["data"]["attributes"]
        {'country': 'GB', 'name': ['Jane Doe']}

        ```
    """

    id: str
    organisation_id: str
    type: str = "accounts"
    attributes: AccountAttributes | None = None
    version: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "organisation_id": self.organisation_id,
            "type": self.type,
        }
        if self.attributes is not None:
            data["attributes"] = self.attributes.to_dict()
        if self.version is not None:
            data["version"] = self.version
        return data

    def to_payload(self) -> dict[str, Any]:
        """Return the creation body, wrapped under the ``data`` key."""
        return {"data": self.to_dict()}


@dataclass(frozen=True)
class Account:
    """An account as returned by the server."""

    id: str
    organisation_id: str
    type: str
    version: int = 0
    attributes: AccountAttributes = field(default_factory=lambda: AccountAttributes(country=""))
    created_on: datetime | None = None
    modified_on: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Account:
        account_id = _require(data, "id", str, "account")
        version = data.get("version", 0)
        if isinstance(version, bool) or not isinstance(version, int):
            msg = "invalid unmarshal JSON value: account.version must be an integer"
            raise UnmarshalError(msg)
        return cls(
            id=account_id,
            organisation_id=_require(data, "organisation_id", str, "account"),
            type=_require(data, "type", str, "account"),
            version=version,
            attributes=AccountAttributes.from_dict(data.get("attributes") or {}),
            created_on=_parse_timestamp(data.get("created_on"), "created_on"),
            modified_on=_parse_timestamp(data.get("modified_on"), "modified_on"),
        )


@dataclass(frozen=True)
class Links:
    """Links attached to a detail response."""

    self: str = ""


@dataclass(frozen=True)
class AccountResponse:
    """Body of a fetch or create response."""

    account: Account
    links: Links = field(default_factory=Links)

    @classmethod
    def from_dict(cls, data: Any) -> AccountResponse:
        account = Account.from_dict(_require(data, "data", dict, "response"))
        links = data.get("links") or {}
        if not isinstance(links, dict):
            msg = "invalid unmarshal JSON value: response.links must be an object"
            raise UnmarshalError(msg)
        return cls(account=account, links=Links(self=str(links.get("self", ""))))
