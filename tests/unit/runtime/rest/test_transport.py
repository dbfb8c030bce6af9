"""Unit tests for ApiClient routing, default headers and RequestBuilder."""

from __future__ import annotations

import json

import pytest
from google.protobuf import wrappers_pb2

from laakhay.cdf.core import ConflictError, HttpMethod, NotFoundError
from laakhay.cdf.models import Asset, AssetQuery, Identity, Items, ItemsWithCursor
from laakhay.cdf.runtime.rest import HTTPResponse


class TestApiClientRouting:
    """Test URL construction and default headers."""

    def test_project_root(self, make_api):
        api, _ = make_api(lambda r: None)
        assert api.api_root == "https://api.test/api/v1/projects/proj"
        assert api.url("assets/list") == "https://api.test/api/v1/projects/proj/assets/list"
        assert api.url("/assets") == "https://api.test/api/v1/projects/proj/assets"

    def test_absolute_urls_pass_through(self, make_api):
        api, _ = make_api(lambda r: None)
        assert api.url("https://files.test/blob?sig=1") == "https://files.test/blob?sig=1"

    def test_default_headers(self, make_api):
        api, _ = make_api(lambda r: None)
        headers = api.default_headers()
        assert headers["x-cdp-app"] == "unit-tests"
        assert headers["x-cdp-sdk"].startswith("laakhay-cdf-")
        assert headers["User-Agent"].startswith("laakhay-cdf/")
        assert headers["Content-Type"] == "application/json"


class TestTypedHelpers:
    """Test get/post/put/delete and the protobuf helpers."""

    @pytest.mark.asyncio
    async def test_get_with_query_object(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {"items": [], "nextCursor": None}))
        page = await api.get("assets", ItemsWithCursor[Asset], params=AssetQuery(limit=5))
        assert page.items == []
        request = http.requests[0]
        assert request.method is HttpMethod.GET
        assert request.params == [("limit", "5")]
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_post_serializes_models(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {"items": []}))
        await api.post(
            "assets/byids", Items[Identity](items=[Identity.of_id(1)]), Items[Asset], idempotent=True
        )
        assert http.bodies() == [{"items": [{"id": 1}]}]
        assert http.contexts[0].idempotent is True

    @pytest.mark.asyncio
    async def test_post_without_output(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, body=b"not json", headers={"Content-Type": "text/plain"}))
        assert await api.post("assets/delete", {"items": []}) is None
        assert http.contexts[0].idempotent is None

    @pytest.mark.asyncio
    async def test_put_and_delete(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {"id": 1}))
        assert await api.put("thing", {"a": 1}, Identity) == Identity.of_id(1)
        assert await api.delete("thing", params={"force": True}) is None
        assert [r.method for r in http.requests] == [HttpMethod.PUT, HttpMethod.DELETE]
        assert http.requests[1].params == [("force", "true")]

    @pytest.mark.asyncio
    async def test_post_protobuf(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {}))
        await api.post_protobuf("timeseries/data", wrappers_pb2.Int64Value(value=7), idempotent=True)
        request = http.requests[0]
        assert request.headers["Content-Type"] == "application/protobuf"
        assert wrappers_pb2.Int64Value.FromString(request.body).value == 7

    @pytest.mark.asyncio
    async def test_post_expect_protobuf(self, make_api, respond):
        body = wrappers_pb2.StringValue(value="dp").SerializeToString()
        api, http = make_api(
            lambda r: respond(200, body=body, headers={"Content-Type": "application/protobuf"})
        )
        message = await api.post_expect_protobuf(
            "timeseries/data/list", {"items": []}, wrappers_pb2.StringValue
        )
        assert message.value == "dp"
        assert http.requests[0].headers["Accept"] == "application/protobuf"
        assert http.contexts[0].idempotent is True

    @pytest.mark.asyncio
    async def test_raw_requests_use_custom_headers(self, make_api, respond):
        api, http = make_api(
            lambda r: respond(200, body=b"\x00\x01", headers={"Content-Type": "application/octet-stream"})
        )
        assert await api.get_raw("https://files.test/blob") == b"\x00\x01"
        await api.put_blob("https://files.test/upload", b"data", "text/csv")
        assert dict(http.contexts[0].custom_headers) == {"Accept": "*/*"}
        assert dict(http.contexts[1].custom_headers) == {"Content-Type": "text/csv"}
        assert http.requests[1].body == b"data"


class TestErrorMapping:
    """Test non-2xx responses become typed errors before decoding."""

    @pytest.mark.asyncio
    async def test_conflict(self, make_api, respond):
        api, _ = make_api(
            lambda r: respond(
                409,
                {"error": {"code": 409, "message": "dup", "duplicated": [{"externalId": "a"}]}},
                headers={"x-request-id": "r-9"},
            )
        )
        with pytest.raises(ConflictError) as exc_info:
            await api.post("assets", {"items": []}, Items[Asset])
        assert exc_info.value.request_id == "r-9"
        assert exc_info.value.duplicated_identities == [Identity.of_external_id("a")]

    @pytest.mark.asyncio
    async def test_not_found_with_accept_nothing(self, make_api, respond):
        api, _ = make_api(lambda r: respond(404, {"error": {"code": 404, "message": "gone"}}))
        with pytest.raises(NotFoundError, match="gone"):
            await api.post("assets/delete", {"items": []})


class TestRequestBuilder:
    """Test the fluent builder directly."""

    @pytest.mark.asyncio
    async def test_builder(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {"ok": True}))
        result = await (
            api.request(HttpMethod.POST, "custom")
            .header("x-extra", "1")
            .query([("a", "1")])
            .query({"b": 2})
            .json({"value": None, "n": 1})
            .idempotent()
            .accept_raw()
            .send()
        )
        assert isinstance(result, HTTPResponse)
        request = http.requests[0]
        assert request.headers["x-extra"] == "1"
        assert request.params == [("a", "1"), ("b", "2")]
        assert json.loads(request.body) == {"n": 1}
        assert request.headers["Accept"] == "*/*"

    @pytest.mark.asyncio
    async def test_query_values_encoded_alike_on_every_path(self, make_api, respond):
        api, http = make_api(lambda r: respond(200, {}))
        await (
            api.request(HttpMethod.GET, "custom")
            .query([("fromPairs", True), ("ids", [1, 2])])
            .query({"fromMapping": False})
            .send()
        )
        assert http.requests[0].params == [
            ("fromPairs", "true"),
            ("ids", "[1, 2]"),
            ("fromMapping", "false"),
        ]
