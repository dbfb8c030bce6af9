"""Patch (update) instructions.

Each patchable field is one of three states:
    - set a value:      UpdateSetNull.of(value)   -> {"set": value}
    - clear the field:  UpdateSetNull.clear()     -> {"setNull": true}
    - leave unchanged:  None (the field is left out of the request)

List and map fields additionally support add/remove. Only fields present in
the request are touched server-side.
"""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from .base import CdfModel
from .identity import IdentityKeyed

T = TypeVar("T")
TAdd = TypeVar("TAdd")
TRemove = TypeVar("TRemove")
K = TypeVar("K")
V = TypeVar("V")
TUpdate = TypeVar("TUpdate", covariant=True)


class UpdateSet(CdfModel, Generic[T]):
    """Set a required field."""

    set: T | None = None

    @classmethod
    def of(cls, value: T) -> UpdateSet[T]:
        return cls(set=value)


class UpdateSetNull(CdfModel, Generic[T]):
    """Set or clear an optional field."""

    set: T | None = None
    set_null: bool | None = None

    @classmethod
    def of(cls, value: T) -> UpdateSetNull[T]:
        return cls(set=value)

    @classmethod
    def clear(cls) -> UpdateSetNull[T]:
        return cls(set_null=True)

    @classmethod
    def from_optional(cls, value: T | None) -> UpdateSetNull[T]:
        """Set when a value is given, clear otherwise."""
        if value is None:
            return cls.clear()
        return cls.of(value)


class UpdateList(CdfModel, Generic[TAdd, TRemove]):
    """Add to, remove from, or replace a list field."""

    add: list[TAdd] | None = None
    remove: list[TRemove] | None = None
    set: list[TAdd] | None = None

    @classmethod
    def replace(cls, values: list[TAdd] | None) -> UpdateList[TAdd, TRemove]:
        """Replace the whole list. None clears it."""
        return cls(set=list(values) if values is not None else [])


class UpdateMap(CdfModel, Generic[K, V]):
    """Add to, remove keys from, or replace a map field."""

    add: dict[K, V] | None = None
    remove: list[K] | None = None
    set: dict[K, V] | None = None

    @classmethod
    def replace(cls, values: dict[K, V] | None) -> UpdateMap[K, V]:
        return cls(set=dict(values) if values is not None else {})


class Patch(IdentityKeyed, Generic[T]):
    """Update of one item: `{"id": 1, "update": {...}}` or `{"externalId": "x", "update": {...}}`."""

    update: T


class IntoPatch(Protocol[TUpdate]):
    """A create item that can be turned into an update of the same resource.

    With `ignore_nulls`, fields that are None are left unchanged; without it
    they are cleared.
    """

    def to_patch(self, ignore_nulls: bool) -> TUpdate: ...


def set_null(value: T | None, ignore_nulls: bool) -> UpdateSetNull[T] | None:
    """Patch an optional field from a create item."""
    if value is None and ignore_nulls:
        return None
    return UpdateSetNull.from_optional(value)


def set_required(value: T | None) -> UpdateSet[T] | None:
    if value is None:
        return None
    return UpdateSet.of(value)


def set_list(values: list[T] | None, ignore_nulls: bool) -> UpdateList[T, T] | None:
    if values is None and ignore_nulls:
        return None
    return UpdateList.replace(values)


def set_map(values: dict[K, V] | None, ignore_nulls: bool) -> UpdateMap[K, V] | None:
    if values is None and ignore_nulls:
        return None
    return UpdateMap.replace(values)
