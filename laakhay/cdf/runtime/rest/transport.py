"""API client: project routing, default headers and typed request helpers."""

from __future__ import annotations

from typing import Any, TypeVar

from google.protobuf.message import Message
from multidict import CIMultiDict

from ...core.config import SDK_NAME, SDK_VERSION, api_root
from ...core.enums import HttpMethod
from .http_client import HTTPClient
from .request_builder import RequestBuilder

M = TypeVar("M", bound=Message)


class ApiClient:
    """Thin typed layer over HTTPClient for one project.

    Paths are relative to `{base_url}/api/v1/projects/{project}`; absolute
    URLs (such as file download links) are used as given.
    """

    def __init__(self, base_url: str, project: str, app_name: str, http: HTTPClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.project = project
        self.app_name = app_name
        self.http = http
        self.api_root = api_root(base_url, project)

    def default_headers(self) -> CIMultiDict[str]:
        return CIMultiDict(
            {
                "x-cdp-sdk": f"{SDK_NAME}-{SDK_VERSION}",
                "x-cdp-app": self.app_name,
                "User-Agent": f"{SDK_NAME}/{SDK_VERSION}",
                "Content-Type": "application/json",
            }
        )

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_root}/{path.lstrip('/')}"

    def request(self, method: HttpMethod, path: str) -> RequestBuilder:
        return RequestBuilder(self, method, self.url(path))

    async def get(self, path: str, output: Any, params: Any = None) -> Any:
        return await self.request(HttpMethod.GET, path).query(params).accept_json(output).send()

    async def post(
        self,
        path: str,
        body: Any,
        output: Any = None,
        params: Any = None,
        *,
        idempotent: bool | None = None,
    ) -> Any:
        """POST a JSON body. With `output` None the response body is discarded."""
        builder = self.request(HttpMethod.POST, path).query(params).json(body)
        if idempotent is not None:
            builder.idempotent(idempotent)
        if output is None:
            builder.accept_nothing()
        else:
            builder.accept_json(output)
        return await builder.send()

    async def put(self, path: str, body: Any, output: Any = None) -> Any:
        builder = self.request(HttpMethod.PUT, path).json(body)
        if output is None:
            builder.accept_nothing()
        else:
            builder.accept_json(output)
        return await builder.send()

    async def delete(self, path: str, output: Any = None, params: Any = None) -> Any:
        builder = self.request(HttpMethod.DELETE, path).query(params)
        if output is None:
            builder.accept_nothing()
        else:
            builder.accept_json(output)
        return await builder.send()

    async def post_protobuf(
        self, path: str, message: Message, output: Any = None, *, idempotent: bool | None = None
    ) -> Any:
        """POST a protobuf-encoded body, expecting JSON (or nothing) back."""
        builder = self.request(HttpMethod.POST, path).protobuf(message)
        if idempotent is not None:
            builder.idempotent(idempotent)
        if output is None:
            builder.accept_nothing()
        else:
            builder.accept_json(output)
        return await builder.send()

    async def post_expect_protobuf(self, path: str, body: Any, message_type: type[M]) -> M:
        """POST a JSON body, expecting a protobuf message back."""
        return await (
            self.request(HttpMethod.POST, path)
            .json(body)
            .idempotent()
            .accept_protobuf(message_type)
            .send()
        )

    async def put_blob(self, url: str, data: bytes, mime_type: str | None = None) -> None:
        """Upload raw bytes, typically to a pre-signed upload URL."""
        headers = {"Content-Type": mime_type} if mime_type else {}
        await (
            self.request(HttpMethod.PUT, url)
            .custom_headers(headers)
            .body(data)
            .accept_nothing()
            .send()
        )

    async def get_raw(self, url: str) -> bytes:
        """Download the raw body at `url` without API headers."""
        response = await (
            self.request(HttpMethod.GET, url)
            .custom_headers({"Accept": "*/*"})
            .accept_raw()
            .send()
        )
        return response.body
