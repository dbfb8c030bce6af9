"""HTTP client with a middleware chain."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

import aiohttp
from multidict import CIMultiDictProxy

from ...core.exceptions import TransportError
from .messages import HTTPRequest, HTTPResponse, RequestContext

if TYPE_CHECKING:
    from .middleware import Middleware

Handler = Callable[[HTTPRequest, RequestContext], Awaitable[HTTPResponse]]


class HTTPClient:
    """Async HTTP client wrapper.

    Every request goes through the configured middleware in order (first is
    outermost) and is finally sent with one shared aiohttp session. Response
    bodies are read in full before the connection is released.
    """

    def __init__(
        self,
        timeout: float | None = None,
        middleware: Sequence[Middleware] | None = None,
    ) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.middleware: list[Middleware] = list(middleware or [])
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def add_middleware(self, middleware: Middleware) -> None:
        """Append a middleware; it becomes the innermost layer."""
        self.middleware.append(middleware)

    async def execute(
        self, request: HTTPRequest, context: RequestContext | None = None
    ) -> HTTPResponse:
        """Run `request` through the middleware chain and send it."""
        context = context if context is not None else RequestContext()
        return await self._chain(0)(request, context)

    def _chain(self, index: int) -> Handler:
        if index >= len(self.middleware):
            return self._send
        layer = self.middleware[index]
        next_handler = self._chain(index + 1)

        async def handler(request: HTTPRequest, context: RequestContext) -> HTTPResponse:
            return await layer.handle(request, context, next_handler)

        return handler

    async def _send(self, request: HTTPRequest, context: RequestContext) -> HTTPResponse:
        method = request.method.value
        try:
            async with self.session.request(
                method,
                request.url,
                params=request.params,
                headers=request.headers,
                data=request.body,
            ) as response:
                body = await response.read()
                return HTTPResponse(
                    status=response.status,
                    headers=CIMultiDictProxy(response.headers.copy()),
                    body=body,
                    method=method,
                    url=request.url,
                )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request timed out: {method} {request.url}", method=method, url=request.url
            ) from e
        except aiohttp.ClientConnectorError as e:
            raise TransportError(
                f"Could not connect: {method} {request.url}: {e}",
                method=method,
                url=request.url,
                connect=True,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                f"Request failed: {method} {request.url}: {e}", method=method, url=request.url
            ) from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
