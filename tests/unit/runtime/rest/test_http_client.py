"""Unit tests for HTTPClient session management and sending.

Sending is exercised against an in-process aiohttp server.
"""

from __future__ import annotations

import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from multidict import CIMultiDict

from laakhay.cdf.core import HttpMethod, TransportError
from laakhay.cdf.runtime.rest import HTTPClient, HTTPRequest, RequestContext


@pytest_asyncio.fixture
async def server():
    async def echo(request: web.Request) -> web.Response:
        body = await request.read()
        return web.json_response(
            {
                "method": request.method,
                "query": dict(request.query),
                "header": request.headers.get("x-test"),
                "body": body.decode(),
            },
            headers={"x-request-id": "rid-1"},
        )

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.Response(text="late")

    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/slow", slow)
    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None
        assert client.middleware == []

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client.session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        client = HTTPClient()
        session1 = client.session
        await session1.close()
        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        _ = client.session
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with HTTPClient() as client:
            session = client.session
        assert session.closed


class TestHTTPClientExecute:
    """Test the middleware chain and the aiohttp send."""

    @pytest.mark.asyncio
    async def test_sends_and_reads_body(self, server):
        async with HTTPClient() as client:
            request = HTTPRequest(
                method=HttpMethod.POST,
                url=str(server.make_url("/echo")),
                headers=CIMultiDict({"x-test": "yes"}),
                params=[("limit", "5")],
                body=b'{"a": 1}',
            )
            response = await client.execute(request)
        assert response.ok
        assert response.request_id == "rid-1"
        assert response.content_type == "application/json"
        assert response.json() == {
            "method": "POST",
            "query": {"limit": "5"},
            "header": "yes",
            "body": '{"a": 1}',
        }

    @pytest.mark.asyncio
    async def test_middleware_order(self, server):
        """Test the first middleware is outermost."""
        order: list[str] = []

        class Layer:
            def __init__(self, name):
                self.name = name

            async def handle(self, request, context, next):
                order.append(f"{self.name}>")
                response = await next(request, context)
                order.append(f"<{self.name}")
                return response

        async with HTTPClient(middleware=[Layer("a"), Layer("b")]) as client:
            client.add_middleware(Layer("c"))
            await client.execute(
                HTTPRequest(method=HttpMethod.GET, url=str(server.make_url("/echo")))
            )
        assert order == ["a>", "b>", "c>", "<c", "<b", "<a"]

    @pytest.mark.asyncio
    async def test_context_passed_to_every_layer(self, server):
        seen = []

        class Layer:
            async def handle(self, request, context, next):
                seen.append(context)
                return await next(request, context)

        context = RequestContext()
        async with HTTPClient(middleware=[Layer(), Layer()]) as client:
            await client.execute(
                HTTPRequest(method=HttpMethod.GET, url=str(server.make_url("/echo"))), context
            )
        assert seen == [context, context]
        assert all(c is context for c in seen)

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self, server):
        async with HTTPClient(timeout=0.05) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.execute(
                    HTTPRequest(method=HttpMethod.GET, url=str(server.make_url("/slow")))
                )
        assert not exc_info.value.connect

    @pytest.mark.asyncio
    async def test_connection_refused_is_connect_error(self, unused_tcp_port):
        async with HTTPClient() as client:
            with pytest.raises(TransportError) as exc_info:
                await client.execute(
                    HTTPRequest(
                        method=HttpMethod.GET, url=f"http://127.0.0.1:{unused_tcp_port}/x"
                    )
                )
        assert exc_info.value.connect
        assert exc_info.value.method == "GET"
