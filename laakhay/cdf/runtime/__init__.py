"""Runtime components: transport, middleware, retry and pagination."""

from .pagination import CursorStream, collect, merge_streams, partition_queries
from .rest import ApiClient, HTTPClient, RequestBuilder, RequestContext
from .retry import Backoff, Retryable, RetryMiddleware, classify

__all__ = [
    "ApiClient",
    "HTTPClient",
    "RequestBuilder",
    "RequestContext",
    "Backoff",
    "Retryable",
    "RetryMiddleware",
    "classify",
    "CursorStream",
    "collect",
    "merge_streams",
    "partition_queries",
]
