"""Shared fixtures for unit tests."""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from typing import Any

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from laakhay.cdf.runtime.rest import ApiClient, HTTPRequest, HTTPResponse, RequestContext


def make_response(
    status: int = 200,
    payload: Any = None,
    headers: dict[str, str] | None = None,
    body: bytes | None = None,
) -> HTTPResponse:
    """Build an HTTPResponse; `payload` is JSON-encoded unless a raw `body` is given."""
    merged = CIMultiDict(headers or {})
    if body is None:
        body = json.dumps(payload).encode() if payload is not None else b""
        merged.setdefault("Content-Type", "application/json")
    return HTTPResponse(status=status, headers=CIMultiDictProxy(merged), body=body)


class FakeHTTP:
    """Stands in for HTTPClient: records every request and answers from a handler.

    The handler receives the HTTPRequest and returns an HTTPResponse, or an
    exception to raise.
    """

    def __init__(self, handler: Callable[[HTTPRequest], Any]) -> None:
        self.handler = handler
        self.requests: list[HTTPRequest] = []
        self.contexts: list[RequestContext | None] = []

    async def execute(
        self, request: HTTPRequest, context: RequestContext | None = None
    ) -> HTTPResponse:
        self.requests.append(request)
        self.contexts.append(context)
        result = self.handler(request)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return result

    def bodies(self) -> list[Any]:
        return [json.loads(r.body) if r.body else None for r in self.requests]

    def paths(self) -> list[str]:
        return [r.url.split("/projects/proj/", 1)[-1] for r in self.requests]


@pytest.fixture
def respond() -> Callable[..., HTTPResponse]:
    return make_response


@pytest.fixture
def make_api() -> Callable[[Callable[[HTTPRequest], Any]], tuple[ApiClient, FakeHTTP]]:
    """Factory: ApiClient for project "proj" backed by a FakeHTTP."""

    def factory(handler: Callable[[HTTPRequest], Any]) -> tuple[ApiClient, FakeHTTP]:
        http = FakeHTTP(handler)
        return ApiClient("https://api.test", "proj", "unit-tests", http), http  # type: ignore[arg-type]

    return factory
