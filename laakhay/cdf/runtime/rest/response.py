"""Response handlers.

A handler is picked when a request is built. It decides the Accept header
sent with the request and how a successful response body becomes a value.
Mismatched content types and malformed bodies raise DecodeError.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Generic, TypeVar

from google.protobuf.message import DecodeError as ProtobufDecodeError
from google.protobuf.message import Message
from pydantic import TypeAdapter, ValidationError

from ...core.exceptions import DecodeError
from .messages import HTTPResponse

T = TypeVar("T")
M = TypeVar("M", bound=Message)


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


class ResponseHandler(Generic[T]):
    """Base class: maps a successful HTTPResponse to a value."""

    accept_header: str = "*/*"

    async def handle(self, response: HTTPResponse) -> T:
        raise NotImplementedError


class JsonResponseHandler(ResponseHandler[T]):
    """Decode a JSON body and validate it against `model` (any type pydantic accepts)."""

    accept_header = "application/json"

    def __init__(self, model: Any) -> None:
        self.model = model

    async def handle(self, response: HTTPResponse) -> T:
        content_type = response.content_type
        if content_type and content_type != "application/json" and not content_type.endswith(
            "+json"
        ):
            raise DecodeError(
                f"Expected application/json, got {content_type}", content_type=content_type
            )
        try:
            data = json.loads(response.body) if response.body else None
        except ValueError as e:
            raise DecodeError(f"Malformed JSON body: {e}", content_type=content_type) from e
        try:
            return _adapter(self.model).validate_python(data)
        except ValidationError as e:
            raise DecodeError(
                f"Response did not match {getattr(self.model, '__name__', self.model)}: {e}",
                content_type=content_type,
            ) from e


class ProtoResponseHandler(ResponseHandler[M]):
    """Decode a protobuf body into `message_type`."""

    accept_header = "application/protobuf"

    def __init__(self, message_type: type[M]) -> None:
        self.message_type = message_type

    async def handle(self, response: HTTPResponse) -> M:
        content_type = response.content_type
        if content_type and content_type not in ("application/protobuf", "application/x-protobuf"):
            raise DecodeError(
                f"Expected application/protobuf, got {content_type}", content_type=content_type
            )
        try:
            return self.message_type.FromString(response.body)
        except ProtobufDecodeError as e:
            raise DecodeError(
                f"Malformed {self.message_type.__name__} message: {e}", content_type=content_type
            ) from e


class RawResponseHandler(ResponseHandler[HTTPResponse]):
    """Return the response unprocessed."""

    async def handle(self, response: HTTPResponse) -> HTTPResponse:
        return response


class NoResponseHandler(ResponseHandler[None]):
    """Discard the body."""

    async def handle(self, response: HTTPResponse) -> None:
        return None
