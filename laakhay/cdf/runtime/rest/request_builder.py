"""Fluent builder for raw API requests.

Architecture:
    Every typed helper on ApiClient funnels through RequestBuilder, and
    callers needing something unusual (custom headers, an absolute URL, a
    protobuf body) use it directly:

        response = await (api.request(HttpMethod.GET, url)
            .custom_headers({"Accept": "*/*"})
            .accept_raw()
            .send())

Design Decisions:
    - The response handler chosen on the builder sets the Accept header
    - Non-2xx responses become ApiError subclasses before any handler runs
    - The builder owns one RequestContext, shared by every retry of the request
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from google.protobuf.message import Message
from multidict import CIMultiDict

from ...core.enums import HttpMethod
from ...core.exceptions import ApiError
from ...models.base import param_value, to_params, to_payload
from .messages import HTTPRequest, HTTPResponse, RequestContext
from .response import (
    JsonResponseHandler,
    NoResponseHandler,
    ProtoResponseHandler,
    RawResponseHandler,
    ResponseHandler,
)

if TYPE_CHECKING:
    from .transport import ApiClient


class RequestBuilder:
    """Builds and sends one request through the client's middleware chain."""

    def __init__(self, api: ApiClient, method: HttpMethod, url: str) -> None:
        self._api = api
        self._request = HTTPRequest(method=method, url=url, headers=api.default_headers())
        self._context = RequestContext()
        self._handler: ResponseHandler[Any] = NoResponseHandler()

    @property
    def request(self) -> HTTPRequest:
        return self._request

    @property
    def context(self) -> RequestContext:
        return self._context

    def header(self, name: str, value: str) -> RequestBuilder:
        self._request.headers[name] = value
        return self

    def query(self, params: Any) -> RequestBuilder:
        """Append query parameters from a query object, a mapping or (key, value) pairs."""
        if params is None:
            return self
        if isinstance(params, Mapping):
            pairs = to_params(dict(params))
        elif isinstance(params, (list, tuple)):
            pairs = [(str(k), param_value(v)) for k, v in params]
        else:
            pairs = to_params(params)
        self._request.params = [*(self._request.params or []), *pairs]
        return self

    def json(self, body: Any) -> RequestBuilder:
        """Serialize `body` (models, containers of models or plain data) as JSON."""
        self._request.body = json.dumps(to_payload(body)).encode("utf-8")
        self._request.headers["Content-Type"] = "application/json"
        return self

    def protobuf(self, message: Message) -> RequestBuilder:
        self._request.body = message.SerializeToString()
        self._request.headers["Content-Type"] = "application/protobuf"
        return self

    def body(self, data: bytes, content_type: str | None = None) -> RequestBuilder:
        self._request.body = data
        if content_type is not None:
            self._request.headers["Content-Type"] = content_type
        return self

    def custom_headers(self, headers: Mapping[str, str]) -> RequestBuilder:
        """Send exactly these headers instead of the defaults."""
        self._context.custom_headers = CIMultiDict(headers)
        return self

    def idempotent(self, value: bool = True) -> RequestBuilder:
        """Mark whether the request may be repeated by the retry layer."""
        self._context.idempotent = value
        return self

    def accept(self, handler: ResponseHandler[Any]) -> RequestBuilder:
        self._handler = handler
        self._request.headers["Accept"] = handler.accept_header
        return self

    def accept_json(self, model: Any) -> RequestBuilder:
        return self.accept(JsonResponseHandler(model))

    def accept_protobuf(self, message_type: type[Message]) -> RequestBuilder:
        return self.accept(ProtoResponseHandler(message_type))

    def accept_raw(self) -> RequestBuilder:
        return self.accept(RawResponseHandler())

    def accept_nothing(self) -> RequestBuilder:
        return self.accept(NoResponseHandler())

    async def send(self) -> Any:
        """Send the request and decode the response with the chosen handler."""
        response = await self._api.http.execute(self._request, self._context)
        raise_for_status(response)
        return await self._handler.handle(response)


def raise_for_status(response: HTTPResponse) -> None:
    """Raise the ApiError matching a non-2xx response."""
    if response.ok:
        return
    raise ApiError.from_response(
        response.status,
        response.body,
        request_id=response.request_id,
        headers=response.headers,
    )
