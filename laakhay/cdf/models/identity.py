"""Identity keys.

An Identity addresses a resource either by internal id or by external id.
The two spaces are distinct: `Identity.of_id(5)` never equals
`Identity.of_external_id("5")`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, model_serializer, model_validator
from pydantic.alias_generators import to_camel

from .base import CdfModel


class Identity(BaseModel):
    """Key that is exactly one of `{"id": int}` or `{"externalId": str}`."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int | None = None
    external_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain_values(cls, data: Any) -> Any:
        if isinstance(data, bool):
            raise ValueError("Identity cannot be a boolean")
        if isinstance(data, int):
            return {"id": data}
        if isinstance(data, str):
            return {"externalId": data}
        return data

    @model_validator(mode="after")
    def _exactly_one(self) -> Identity:
        if (self.id is None) == (self.external_id is None):
            raise ValueError("Identity must have exactly one of id or externalId")
        return self

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> dict[str, Any]:
        return {k: v for k, v in handler(self).items() if v is not None}

    @classmethod
    def of_id(cls, id: int) -> Identity:
        return cls(id=id)

    @classmethod
    def of_external_id(cls, external_id: str) -> Identity:
        return cls(external_id=external_id)

    @classmethod
    def from_value(cls, value: Identity | int | str) -> Identity:
        """Build an identity from an int (internal id) or str (external id)."""
        if isinstance(value, Identity):
            return value
        return cls.model_validate(value)

    def as_id(self) -> int | None:
        return self.id

    def as_external_id(self) -> str | None:
        return self.external_id

    @property
    def is_id(self) -> bool:
        return self.id is not None

    def __str__(self) -> str:
        if self.id is not None:
            return f"id={self.id}"
        return f"externalId={self.external_id!r}"


class CogniteId(CdfModel):
    """Key by internal id only."""

    model_config = ConfigDict(frozen=True)

    id: int

    @model_validator(mode="before")
    @classmethod
    def _from_int(cls, data: Any) -> Any:
        if isinstance(data, int) and not isinstance(data, bool):
            return {"id": data}
        return data


class CogniteExternalId(CdfModel):
    """Key by external id only."""

    model_config = ConfigDict(frozen=True)

    external_id: str

    @model_validator(mode="before")
    @classmethod
    def _from_str(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"externalId": data}
        return data


@runtime_checkable
class EqIdentity(Protocol):
    """A type that can tell whether an identity points at it."""

    def matches(self, identity: Identity) -> bool: ...


def identity_of(id: int | None, external_id: str | None) -> Identity:
    """Pick the identity of a DTO, preferring a positive internal id."""
    if id is not None and id > 0:
        return Identity.of_id(id)
    if external_id is not None:
        return Identity.of_external_id(external_id)
    return Identity.of_id(id or 0)


def matches_identity(identity: Identity, id: int | None, external_id: str | None) -> bool:
    if identity.id is not None:
        return identity.id == id
    return external_id is not None and identity.external_id == external_id


class IdentityKeyed(CdfModel):
    """Model whose `id: Identity` field is flattened into the surrounding object.

    `{"id": Identity.of_external_id("a"), "before": "now"}` goes on the wire as
    `{"externalId": "a", "before": "now"}`.
    """

    id: Identity

    @model_serializer(mode="wrap")
    def _flatten_identity(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        identity = data.pop("id", None) or {}
        return {**identity, **data}

    def matches(self, identity: Identity) -> bool:
        return self.id == identity
