"""Unit tests for auth, custom-header and tracing middleware."""

from __future__ import annotations

import logging

import pytest
from multidict import CIMultiDict

from laakhay.cdf.auth import CustomAuthenticator, FixedTokenAuthenticator
from laakhay.cdf.core import HttpMethod, TransportError
from laakhay.cdf.runtime.rest import (
    AuthMiddleware,
    CustomHeadersMiddleware,
    HTTPClient,
    HTTPRequest,
    HTTPResponse,
    LoggingTracer,
    RequestContext,
    RequestObservation,
    TracingMiddleware,
)
from laakhay.cdf.runtime.rest.middleware import AUTH_IN_PROGRESS


def _response(status: int = 200) -> HTTPResponse:
    return HTTPResponse(status=status, headers=CIMultiDict(), body=b"")


def _request(url: str = "https://api.test/assets") -> HTTPRequest:
    return HTTPRequest(method=HttpMethod.GET, url=url, headers=CIMultiDict({"Accept": "*/*"}))


class RecordingSend:
    """Innermost layer: records what would be sent."""

    def __init__(self, status: int = 200):
        self.status = status
        self.sent: list[tuple[HTTPRequest, RequestContext]] = []

    async def handle(self, request, context, next):
        self.sent.append((request, context))
        return _response(self.status)


def _client_with_auth(authenticator, status: int = 200) -> tuple[HTTPClient, RecordingSend]:
    """HTTPClient whose chain ends in auth followed by a recording layer."""
    send = RecordingSend(status)
    client = HTTPClient()
    client.add_middleware(AuthMiddleware(authenticator, client))
    client.add_middleware(send)
    return client, send


class TestAuthMiddleware:
    """Test header injection and reentrancy."""

    @pytest.mark.asyncio
    async def test_sets_headers(self):
        client, send = _client_with_auth(FixedTokenAuthenticator("tok"))
        await client.execute(_request())
        request, context = send.sent[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert AUTH_IN_PROGRESS not in context.extensions

    @pytest.mark.asyncio
    async def test_nested_requests_are_not_authenticated(self):
        """Test a request sent by the authenticator passes through auth untouched."""
        calls = []

        async def callback(headers, send):
            calls.append(1)
            token = await send(_request("https://login.test/token"))
            headers["Authorization"] = f"Bearer {token.status}"

        client, send = _client_with_auth(CustomAuthenticator(callback))
        await client.execute(_request())

        assert len(calls) == 1
        urls = [r.url for r, _ in send.sent]
        assert urls == ["https://login.test/token", "https://api.test/assets"]
        token_request, nested_context = send.sent[0]
        assert "Authorization" not in token_request.headers
        assert send.sent[1][0].headers["Authorization"] == "Bearer 200"
        assert nested_context.extensions is send.sent[1][1].extensions

    @pytest.mark.asyncio
    async def test_flag_cleared_when_authenticator_fails(self):
        async def callback(headers, send):
            raise RuntimeError("no token")

        client, send = _client_with_auth(CustomAuthenticator(callback))
        context = RequestContext()
        with pytest.raises(RuntimeError):
            await client.execute(_request(), context)
        assert AUTH_IN_PROGRESS not in context.extensions
        assert send.sent == []

    @pytest.mark.asyncio
    async def test_unauthorized_invalidates(self):
        invalidated = []
        authenticator = CustomAuthenticator(
            lambda headers, send: None, on_invalidate=lambda: invalidated.append(1)
        )
        client, _ = _client_with_auth(authenticator, status=401)
        response = await client.execute(_request())
        assert response.status == 401
        assert invalidated == [1]


class TestCustomHeadersMiddleware:
    """Test custom headers replace the request headers."""

    @pytest.mark.asyncio
    async def test_replaces_headers(self):
        seen = []

        async def next_(request, context):
            seen.append(request.headers)
            return _response()

        request = _request()
        request.headers["x-cdp-app"] = "app"
        await CustomHeadersMiddleware().handle(
            request, RequestContext(custom_headers={"Range": "bytes=0-9"}), next_
        )
        assert dict(seen[0]) == {"Range": "bytes=0-9"}

    @pytest.mark.asyncio
    async def test_no_custom_headers_keeps_request(self):
        seen = []

        async def next_(request, context):
            seen.append(request.headers)
            return _response()

        await CustomHeadersMiddleware().handle(_request(), RequestContext(), next_)
        assert dict(seen[0]) == {"Accept": "*/*"}


class RecordingTracer:
    def __init__(self):
        self.observations: list[RequestObservation] = []

    def observe(self, observation):
        self.observations.append(observation)


class TestTracingMiddleware:
    """Test one observation per request, with outcome."""

    @pytest.mark.asyncio
    async def test_observes_response(self):
        tracer = RecordingTracer()

        async def next_(request, context):
            return _response(201)

        response = await TracingMiddleware(tracer).handle(_request(), RequestContext(), next_)
        assert response.status == 201
        [observation] = tracer.observations
        assert observation.method == "GET"
        assert observation.url == "https://api.test/assets"
        assert observation.response is response
        assert observation.error is None
        assert observation.duration >= 0
        assert observation.succeeded

    @pytest.mark.asyncio
    async def test_observes_error_and_reraises(self):
        tracer = RecordingTracer()
        error = TransportError("down")

        async def next_(request, context):
            raise error

        with pytest.raises(TransportError):
            await TracingMiddleware(tracer).handle(_request(), RequestContext(), next_)
        [observation] = tracer.observations
        assert observation.error is error
        assert not observation.succeeded

    def test_logging_tracer(self, caplog):
        caplog.set_level(logging.DEBUG, logger="laakhay.cdf.runtime.rest.middleware")
        LoggingTracer().observe(
            RequestObservation("GET", "https://api.test/x", 0.01, response=_response(404))
        )
        [record] = caplog.records
        assert record.getMessage() == "http_request"
        assert record.status == 404
        assert record.url == "https://api.test/x"
