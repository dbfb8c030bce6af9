"""REST runtime abstractions."""

from .http_client import HTTPClient
from .messages import HTTPRequest, HTTPResponse, RequestContext
from .middleware import (
    AuthMiddleware,
    CustomHeadersMiddleware,
    LoggingTracer,
    Middleware,
    RequestObservation,
    RequestTracer,
    TracingMiddleware,
)
from .request_builder import RequestBuilder, raise_for_status
from .response import (
    JsonResponseHandler,
    NoResponseHandler,
    ProtoResponseHandler,
    RawResponseHandler,
    ResponseHandler,
)
from .transport import ApiClient

__all__ = [
    "ApiClient",
    "HTTPClient",
    "HTTPRequest",
    "HTTPResponse",
    "RequestContext",
    "RequestBuilder",
    "raise_for_status",
    # Middleware
    "Middleware",
    "AuthMiddleware",
    "CustomHeadersMiddleware",
    "TracingMiddleware",
    "RequestTracer",
    "RequestObservation",
    "LoggingTracer",
    # Response handlers
    "ResponseHandler",
    "JsonResponseHandler",
    "ProtoResponseHandler",
    "RawResponseHandler",
    "NoResponseHandler",
]
