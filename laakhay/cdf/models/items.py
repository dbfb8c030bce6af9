"""Items envelopes.

Request and list-response bodies share one shape, `{"items": [...]}`, with
optional extra fields merged into the same object: `nextCursor` on paginated
responses and `ignoreUnknownIds` on lookups and deletes.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import Field

from .base import CdfModel

T = TypeVar("T")


class Items(CdfModel, Generic[T]):
    """Plain list envelope."""

    items: list[T] = Field(default_factory=list)


ItemsWithoutCursor = Items


class ItemsWithCursor(Items[T], Generic[T]):
    """List envelope carrying the cursor of the next page (None on the last page)."""

    next_cursor: str | None = None


class ItemsWithIgnoreUnknownIds(Items[T], Generic[T]):
    """List envelope with the ignore-unknown-ids flag."""

    ignore_unknown_ids: bool = True
