"""Shapes shared by several resource filters."""

from __future__ import annotations

from typing import Generic, TypeVar

from .base import CdfModel

T = TypeVar("T")


class Range(CdfModel, Generic[T]):
    """Inclusive range filter, e.g. on created/updated timestamps (ms since epoch)."""

    min: T | None = None
    max: T | None = None


class LabelsFilter(CdfModel):
    """Match items having all, or any, of the given labels."""

    contains_all: list[dict[str, str]] | None = None
    contains_any: list[dict[str, str]] | None = None

    @classmethod
    def all_of(cls, *external_ids: str) -> LabelsFilter:
        return cls(contains_all=[{"externalId": e} for e in external_ids])

    @classmethod
    def any_of(cls, *external_ids: str) -> LabelsFilter:
        return cls(contains_any=[{"externalId": e} for e in external_ids])
