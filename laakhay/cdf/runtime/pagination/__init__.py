"""Cursor pagination and partitioned streaming.

Usage:
    List and filter capabilities expose `.stream()` and `.stream_partitioned()`,
    both built from the pieces exported here. They can also be used directly
    with any async fetch function returning an ItemsWithCursor page.
"""

from __future__ import annotations

from .streams import (
    CursorStream,
    StreamState,
    collect,
    merge_streams,
    partition_queries,
)

__all__ = [
    "CursorStream",
    "StreamState",
    "collect",
    "merge_streams",
    "partition_queries",
]
