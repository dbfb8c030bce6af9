"""Structured logging for paginated streams.

This module provides telemetry hooks for cursor pagination, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    source: str,
    page_index: int,
    items: int,
    has_next: bool,
    latency_ms: float | None = None,
) -> None:
    """Log one fetched page.

    Args:
        source: Name of the paginated operation (e.g. "assets.list")
        page_index: Zero-based index of the page within its stream
        items: Number of items on the page
        has_next: Whether the response carried a cursor to a next page
        latency_ms: Fetch latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "source": source,
            "page_index": page_index,
            "items": items,
            "has_next": has_next,
            "latency_ms": latency_ms,
        },
    )


def log_stream_complete(*, source: str, pages: int, total_items: int) -> None:
    logger.debug(
        "stream_complete",
        extra={"source": source, "pages": pages, "total_items": total_items},
    )


def log_stream_error(
    *,
    source: str,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a page fetch that ended its stream.

    Args:
        source: Name of the paginated operation
        page_index: Zero-based index of the page that failed
        error_type: Exception class name (e.g. "ServerError")
        error_message: Error message
    """
    logger.error(
        "stream_error",
        extra={
            "source": source,
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
