"""Request middleware.

Architecture:
    A middleware wraps the rest of the chain: it receives the request, the
    per-request context and a `next` handler, and must call `next` exactly
    once per invocation (the retry middleware is the one exception, it
    re-runs the inner chain per attempt). The client assembles the chain in
    this order, outermost first:

        tracing -> retry -> custom headers -> [user middleware] -> auth -> send

Design Decisions:
    - State lives in the RequestContext, never on the middleware, so concurrent
      requests cannot see each other's flags
    - The auth flag is set for the duration of the authenticator call only;
      requests the authenticator sends through the same client carry a nested
      context sharing the flag and pass through without auth headers
    - Tracing observes but never alters the request or the outcome
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from multidict import CIMultiDict

from .messages import HTTPRequest, HTTPResponse, RequestContext

if TYPE_CHECKING:
    from ...auth.authenticator import Authenticator
    from .http_client import HTTPClient

logger = logging.getLogger(__name__)

Next = Callable[[HTTPRequest, RequestContext], Awaitable[HTTPResponse]]

AUTH_IN_PROGRESS = "laakhay.cdf.auth_in_progress"


@runtime_checkable
class Middleware(Protocol):
    async def handle(
        self, request: HTTPRequest, context: RequestContext, next: Next
    ) -> HTTPResponse: ...


class AuthMiddleware:
    """Ask the authenticator for headers before the request is sent."""

    def __init__(self, authenticator: Authenticator, client: HTTPClient) -> None:
        self.authenticator = authenticator
        self._client = client

    async def handle(
        self, request: HTTPRequest, context: RequestContext, next: Next
    ) -> HTTPResponse:
        if not context.extensions.get(AUTH_IN_PROGRESS):
            context.extensions[AUTH_IN_PROGRESS] = True
            try:
                await self.authenticator.set_headers(
                    request.headers, lambda r: self._client.execute(r, context.nested())
                )
            finally:
                context.extensions.pop(AUTH_IN_PROGRESS, None)

            response = await next(request, context)
            if response.status == 401:
                self.authenticator.invalidate()
            return response
        return await next(request, context)


class CustomHeadersMiddleware:
    """Replace all request headers with the context's custom headers, if any.

    Used for requests that need a different header set than the API defaults,
    such as downloading a file from a pre-signed URL.
    """

    async def handle(
        self, request: HTTPRequest, context: RequestContext, next: Next
    ) -> HTTPResponse:
        if context.custom_headers is not None:
            request.headers = CIMultiDict(context.custom_headers)
        return await next(request, context)


@dataclass(frozen=True)
class RequestObservation:
    """One completed request as seen by a tracer.

    Exactly one of `response` and `error` is set.
    """

    method: str
    url: str
    duration: float
    response: HTTPResponse | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.response is not None and self.response.ok


@runtime_checkable
class RequestTracer(Protocol):
    def observe(self, observation: RequestObservation) -> None: ...


class LoggingTracer:
    """Tracer that logs every request with structured fields."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def observe(self, observation: RequestObservation) -> None:
        extra: dict[str, object] = {
            "method": observation.method,
            "url": observation.url,
            "duration_ms": observation.duration * 1000.0,
        }
        if observation.response is not None:
            extra["status"] = observation.response.status
            extra["request_id"] = observation.response.request_id
        if observation.error is not None:
            extra["error_type"] = type(observation.error).__name__
            extra["error_message"] = str(observation.error)
        logger.log(self.level, "http_request", extra=extra)


class TracingMiddleware:
    """Report method, URL, duration and outcome of each request to a tracer."""

    def __init__(self, tracer: RequestTracer | None = None) -> None:
        self.tracer = tracer or LoggingTracer()

    async def handle(
        self, request: HTTPRequest, context: RequestContext, next: Next
    ) -> HTTPResponse:
        method = request.method.value
        url = request.url
        start = time.monotonic()
        try:
            response = await next(request, context)
        except BaseException as e:
            self.tracer.observe(
                RequestObservation(method, url, time.monotonic() - start, error=e)
            )
            raise
        self.tracer.observe(RequestObservation(method, url, time.monotonic() - start, response))
        return response
