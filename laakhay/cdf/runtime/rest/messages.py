"""Request, response and per-request context passed through the middleware chain."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from multidict import CIMultiDict, CIMultiDictProxy

from ...core.enums import HttpMethod


@dataclass
class HTTPRequest:
    """An outgoing request. Middleware may mutate headers before sending."""

    method: HttpMethod
    url: str
    headers: CIMultiDict[str] = field(default_factory=CIMultiDict)
    params: list[tuple[str, str]] | None = None
    body: bytes | None = None

    def copy(self) -> HTTPRequest:
        """Shallow copy with its own header map, so every retry starts from the same headers."""
        return replace(self, headers=CIMultiDict(self.headers))


@dataclass(frozen=True)
class HTTPResponse:
    """A response whose body has been read in full."""

    status: int
    headers: CIMultiDictProxy[str] | Mapping[str, str]
    body: bytes
    method: str = ""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        """Media type without parameters, lower-cased (e.g. "application/json")."""
        raw = self.headers.get("Content-Type", "") or ""
        return raw.split(";", 1)[0].strip().lower()

    @property
    def request_id(self) -> str | None:
        return self.headers.get("x-request-id")

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class RequestContext:
    """State scoped to one logical request.

    The same context travels through every middleware layer and every retry of
    the request. Requests issued while handling it (such as an authenticator
    fetching a token through the same client) reuse it, which is how the auth
    middleware recognizes them.

    Attributes:
        extensions: Free-form flags set by middleware
        custom_headers: When set, replaces the request headers entirely
        idempotent: Whether the request may be repeated; None derives it from the method
    """

    extensions: dict[str, Any] = field(default_factory=dict)
    custom_headers: Mapping[str, str] | None = None
    idempotent: bool | None = None

    def nested(self) -> RequestContext:
        """Context for a request issued while handling this one.

        Shares `extensions` so middleware flags stay visible, but not the
        custom headers or idempotency of the outer request.
        """
        return RequestContext(extensions=self.extensions)

    def is_idempotent(self, request: HTTPRequest) -> bool:
        if self.idempotent is not None:
            return self.idempotent
        return request.method.is_idempotent
