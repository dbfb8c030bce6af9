"""End-to-end tests for CdfClient against an in-process aiohttp server."""

from __future__ import annotations

from collections import Counter

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from laakhay.cdf import CdfClient, ClientConfig
from laakhay.cdf.auth import FixedTokenAuthenticator
from laakhay.cdf.core import (
    AuthenticatorError,
    BadRequestError,
    ConfigError,
    ServerError,
    UnauthorizedError,
)
from laakhay.cdf.models import AssetQuery, Identity

ROOT = "/api/v1/projects/proj"


def _asset(id: int) -> dict:
    return {"id": id, "name": f"asset-{id}", "createdTime": 0, "lastUpdatedTime": 0}


class FakeApi:
    """Request handlers plus counters shared by the tests."""

    def __init__(self):
        self.calls: Counter[str] = Counter()
        self.authorizations: list[str | None] = []
        self.fail_next_byids = 0

    async def token(self, request: web.Request) -> web.Response:
        self.calls["token"] += 1
        form = await request.post()
        if form.get("client_secret") != "secret":
            return web.json_response({"error": "invalid_client"}, status=401)
        return web.json_response({"access_token": "tok", "expires_in": 3600})

    async def list_assets(self, request: web.Request) -> web.Response:
        self.calls["assets"] += 1
        self.authorizations.append(request.headers.get("Authorization"))
        if request.query.get("cursor") == "page-2":
            return web.json_response({"items": [_asset(i) for i in range(4, 7)]})
        return web.json_response(
            {"items": [_asset(i) for i in range(1, 4)], "nextCursor": "page-2"}
        )

    async def events_byids(self, request: web.Request) -> web.Response:
        self.calls["events/byids"] += 1
        if self.fail_next_byids:
            self.fail_next_byids -= 1
            return web.json_response({"error": {"code": 503, "message": "busy"}}, status=503)
        body = await request.json()
        return web.json_response({"items": [{"id": item["id"]} for item in body["items"]]})

    async def events_delete(self, request: web.Request) -> web.Response:
        self.calls["events/delete"] += 1
        body = await request.json()
        unknown = [item for item in body["items"] if item.get("id") == 404]
        if unknown and not body.get("ignoreUnknownIds"):
            return web.json_response(
                {"error": {"code": 400, "message": "Not found", "missing": unknown}}, status=400
            )
        return web.json_response({})

    async def expired(self, request: web.Request) -> web.Response:
        self.calls["labels/list"] += 1
        return web.json_response({"error": {"code": 401, "message": "expired"}}, status=401)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest_asyncio.fixture
async def server(fake_api):
    app = web.Application()
    app.router.add_post("/token", fake_api.token)
    app.router.add_get(f"{ROOT}/assets", fake_api.list_assets)
    app.router.add_post(f"{ROOT}/events/byids", fake_api.events_byids)
    app.router.add_post(f"{ROOT}/events/delete", fake_api.events_delete)
    app.router.add_post(f"{ROOT}/labels/list", fake_api.expired)
    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


def _client(server, secret: str = "secret", **kwargs) -> CdfClient:
    return (
        CdfClient.builder()
        .set_base_url(str(server.make_url("/")))
        .set_project("proj")
        .set_app_name("e2e-tests")
        .set_oidc_credentials("cid", secret, str(server.make_url("/token")))
        .set_config(ClientConfig(initial_backoff=0.0, max_backoff=0.0, **kwargs))
        .build()
    )


class TestEndToEnd:
    """Test the full middleware chain over HTTP."""

    @pytest.mark.asyncio
    async def test_stream_assets_over_two_pages(self, server, fake_api):
        async with _client(server) as client:
            names = [a.name async for a in client.assets.list.stream(AssetQuery(limit=3))]
        assert names == [f"asset-{i}" for i in range(1, 7)]
        assert fake_api.calls["assets"] == 2
        assert fake_api.calls["token"] == 1
        assert fake_api.authorizations == ["Bearer tok", "Bearer tok"]

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, server, fake_api):
        fake_api.fail_next_byids = 1
        async with _client(server) as client:
            events = await client.events.retrieve([1, 2])
        assert [e.id for e in events] == [1, 2]
        assert fake_api.calls["events/byids"] == 2

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, server, fake_api):
        fake_api.fail_next_byids = 10
        async with _client(server, max_retries=2) as client:
            with pytest.raises(ServerError) as exc_info:
                await client.events.retrieve([1])
        assert exc_info.value.code == 503
        assert fake_api.calls["events/byids"] == 3

    @pytest.mark.asyncio
    async def test_delete_unknown_ids(self, server, fake_api):
        async with _client(server) as client:
            with pytest.raises(BadRequestError) as exc_info:
                await client.events.delete([404])
            assert exc_info.value.missing_identities == [Identity.of_id(404)]

            await client.events.delete([404], ignore_unknown_ids=True)
            await client.events.delete([404], ignore_unknown_ids=True)
        assert fake_api.calls["events/delete"] == 3

    @pytest.mark.asyncio
    async def test_unauthorized_retried_once_with_new_token(self, server, fake_api):
        async with _client(server) as client:
            with pytest.raises(UnauthorizedError):
                await client.labels.filter(None)
        assert fake_api.calls["labels/list"] == 2
        assert fake_api.calls["token"] == 2

    @pytest.mark.asyncio
    async def test_bad_credentials(self, server, fake_api):
        async with _client(server, secret="wrong", max_retries=0) as client:
            with pytest.raises(AuthenticatorError, match="invalid_client"):
                await client.assets.list()
        assert fake_api.calls["assets"] == 0

    @pytest.mark.asyncio
    async def test_user_middleware_sees_every_attempt(self, server, fake_api):
        seen: list[str] = []

        class Recorder:
            async def handle(self, request, context, next):
                seen.append(request.url.rsplit("/", 1)[-1])
                return await next(request, context)

        fake_api.fail_next_byids = 1
        client = (
            CdfClient.builder()
            .set_base_url(str(server.make_url("/")))
            .set_project("proj")
            .set_app_name("e2e-tests")
            .set_authenticator(FixedTokenAuthenticator("tok"))
            .set_config(ClientConfig(initial_backoff=0.0, max_backoff=0.0))
            .add_middleware(Recorder())
            .build()
        )
        async with client:
            await client.events.retrieve([1])
        assert seen == ["byids", "byids"]


class TestClientConstruction:
    """Test the builder and environment loading."""

    def test_builder_requires_authenticator(self):
        with pytest.raises(ConfigError, match="Authenticator"):
            CdfClient.builder().set_project("p").set_app_name("a").build()

    def test_builder_requires_project(self):
        with pytest.raises(ConfigError, match="Project"):
            CdfClient.builder().set_authenticator(FixedTokenAuthenticator("t")).set_app_name("a").build()

    def test_builder_requires_app_name(self):
        with pytest.raises(ConfigError, match="App name"):
            CdfClient.builder().set_authenticator(FixedTokenAuthenticator("t")).set_project("p").build()

    def test_builder_overrides(self):
        client = (
            CdfClient.builder()
            .set_authenticator(FixedTokenAuthenticator("t"))
            .set_project("p")
            .set_app_name("a")
            .set_max_retries(2)
            .set_timeout(30.0)
            .build()
        )
        assert client.config.max_retries == 2
        assert client.config.timeout == 30.0
        assert client.project == "p"
        assert client.api_client.api_root == "https://api.cognitedata.com/api/v1/projects/p"
        assert client.assets.list.path() == "assets"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COGNITE_BASE_URL", "https://example.test")
        monkeypatch.setenv("COGNITE_PROJECT", "env-project")
        monkeypatch.setenv("COGNITE_CLIENT_ID", "cid")
        monkeypatch.setenv("COGNITE_CLIENT_SECRET", "secret")
        monkeypatch.setenv("COGNITE_TOKEN_URL", "https://login.test/token")
        monkeypatch.setenv("COGNITE_SCOPES", "https://example.test/.default")
        monkeypatch.delenv("COGNITE_AUDIENCE", raising=False)

        client = CdfClient.from_env("env-app")
        assert client.project == "env-project"
        assert client.api_client.base_url == "https://example.test"
        assert client.authenticator.scopes == "https://example.test/.default"
        assert client.authenticator.audience is None

    def test_from_env_missing_variable(self, monkeypatch):
        for name in ("COGNITE_PROJECT", "COGNITE_CLIENT_ID", "COGNITE_CLIENT_SECRET", "COGNITE_TOKEN_URL"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ConfigError, match="COGNITE_CLIENT_ID"):
            CdfClient.from_env("env-app")
