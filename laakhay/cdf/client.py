"""CdfClient facade: one HTTP client, one middleware chain, typed resources.

Architecture:
    CdfClient wires the layers together:

        resources  ->  ApiClient  ->  HTTPClient.execute
                                        TracingMiddleware
                                        RetryMiddleware
                                        CustomHeadersMiddleware
                                        [user middleware]
                                        AuthMiddleware
                                        send (aiohttp)

    All resources share the same ApiClient, so a client is cheap to pass
    around and safe to use from concurrent tasks.

Design Decisions:
    - The middleware order is fixed; user middleware runs after custom headers
      and before auth, so it sees every retry attempt
    - Auth sits innermost and its token requests re-enter the same chain, so
      they are traced and retried like any other request
    - Context manager pattern closes the aiohttp session

Example:
    >>> async with CdfClient.from_env("my-app") as client:
    ...     async for asset in client.assets.list.stream(AssetQuery(limit=1000)):
    ...         print(asset.name)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from .auth.authenticator import Authenticator, OIDCAuthenticator
from .core.config import (
    DEFAULT_BASE_URL,
    ENV_AUDIENCE,
    ENV_BASE_URL,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_PROJECT,
    ENV_RESOURCE,
    ENV_SCOPES,
    ENV_TOKEN_URL,
    ClientConfig,
    env_or,
    env_or_error,
    env_or_none,
)
from .core.exceptions import ConfigError
from .resources.assets import AssetsResource
from .resources.events import EventsResource
from .resources.files import FilesResource
from .resources.labels import LabelsResource
from .resources.spaces import SpacesResource
from .resources.time_series import TimeSeriesResource
from .runtime.rest.http_client import HTTPClient
from .runtime.rest.middleware import (
    AuthMiddleware,
    CustomHeadersMiddleware,
    Middleware,
    RequestTracer,
    TracingMiddleware,
)
from .runtime.rest.transport import ApiClient
from .runtime.retry import RetryMiddleware

logger = logging.getLogger(__name__)


class CdfClient:
    """Async client for one project.

    Args:
        base_url: Service URL, e.g. "https://api.cognitedata.com"
        project: Project name; every path is routed under it
        app_name: Sent in the x-cdp-app header
        authenticator: Produces auth headers for every request
        config: Retry, backoff and timeout settings (defaults if None)
        middleware: Extra middleware, run between custom headers and auth
        tracer: Receives one observation per request (logs at debug if None)
    """

    def __init__(
        self,
        base_url: str,
        project: str,
        app_name: str,
        authenticator: Authenticator,
        config: ClientConfig | None = None,
        middleware: Sequence[Middleware] | None = None,
        tracer: RequestTracer | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.authenticator = authenticator
        self.http = HTTPClient(
            timeout=self.config.timeout,
            middleware=[
                TracingMiddleware(tracer),
                RetryMiddleware.from_config(self.config),
                CustomHeadersMiddleware(),
                *(middleware or []),
            ],
        )
        self.http.add_middleware(AuthMiddleware(authenticator, self.http))
        self.api_client = ApiClient(base_url, project, app_name, self.http)

        self.assets = AssetsResource(self.api_client)
        self.events = EventsResource(self.api_client)
        self.time_series = TimeSeriesResource(self.api_client)
        self.files = FilesResource(self.api_client)
        self.labels = LabelsResource(self.api_client)
        self.spaces = SpacesResource(self.api_client)

        logger.debug(
            "client_created",
            extra={"base_url": base_url, "project": project, "app_name": app_name},
        )

    @property
    def project(self) -> str:
        return self.api_client.project

    @classmethod
    def from_env(cls, app_name: str, config: ClientConfig | None = None) -> CdfClient:
        """Build a client with OIDC client-credentials auth from environment variables.

        Reads COGNITE_BASE_URL (optional), COGNITE_PROJECT, COGNITE_CLIENT_ID,
        COGNITE_CLIENT_SECRET, COGNITE_TOKEN_URL and the optional
        COGNITE_RESOURCE, COGNITE_AUDIENCE and COGNITE_SCOPES.

        Raises:
            ConfigError: If a required variable is missing
        """
        authenticator = OIDCAuthenticator(
            client_id=env_or_error(ENV_CLIENT_ID),
            client_secret=env_or_error(ENV_CLIENT_SECRET),
            token_url=env_or_error(ENV_TOKEN_URL),
            resource=env_or_none(ENV_RESOURCE),
            audience=env_or_none(ENV_AUDIENCE),
            scopes=env_or_none(ENV_SCOPES),
        )
        return cls(
            base_url=env_or(ENV_BASE_URL, DEFAULT_BASE_URL),
            project=env_or_error(ENV_PROJECT),
            app_name=app_name,
            authenticator=authenticator,
            config=config,
        )

    @staticmethod
    def builder() -> ClientBuilder:
        return ClientBuilder()

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> CdfClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class ClientBuilder:
    """Fluent construction of a CdfClient.

    Example:
        >>> client = (
        ...     CdfClient.builder()
        ...     .set_project("my-project")
        ...     .set_app_name("my-app")
        ...     .set_oidc_credentials(client_id, client_secret, token_url, scopes=scopes)
        ...     .set_max_retries(3)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._base_url = DEFAULT_BASE_URL
        self._project: str | None = None
        self._app_name: str | None = None
        self._authenticator: Authenticator | None = None
        self._config = ClientConfig()
        self._config_overrides: dict[str, Any] = {}
        self._middleware: list[Middleware] = []
        self._tracer: RequestTracer | None = None

    def set_base_url(self, base_url: str) -> ClientBuilder:
        self._base_url = base_url
        return self

    def set_project(self, project: str) -> ClientBuilder:
        self._project = project
        return self

    def set_app_name(self, app_name: str) -> ClientBuilder:
        self._app_name = app_name
        return self

    def set_authenticator(self, authenticator: Authenticator) -> ClientBuilder:
        self._authenticator = authenticator
        return self

    def set_oidc_credentials(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        *,
        resource: str | None = None,
        audience: str | None = None,
        scopes: str | None = None,
    ) -> ClientBuilder:
        return self.set_authenticator(
            OIDCAuthenticator(
                client_id,
                client_secret,
                token_url,
                resource=resource,
                audience=audience,
                scopes=scopes,
            )
        )

    def set_config(self, config: ClientConfig) -> ClientBuilder:
        self._config = config
        self._config_overrides.clear()
        return self

    def set_max_retries(self, max_retries: int) -> ClientBuilder:
        self._config_overrides["max_retries"] = max_retries
        return self

    def set_timeout(self, timeout: float | None) -> ClientBuilder:
        self._config_overrides["timeout"] = timeout
        return self

    def add_middleware(self, middleware: Middleware) -> ClientBuilder:
        self._middleware.append(middleware)
        return self

    def set_tracer(self, tracer: RequestTracer) -> ClientBuilder:
        self._tracer = tracer
        return self

    def build(self) -> CdfClient:
        """Create the client.

        Raises:
            ConfigError: If the authenticator, project or app name is missing
        """
        if self._authenticator is None:
            raise ConfigError("Authenticator is required")
        if not self._project:
            raise ConfigError("Project is required")
        if not self._app_name:
            raise ConfigError("App name is required")

        config = self._config
        if self._config_overrides:
            config = replace(config, **self._config_overrides)

        return CdfClient(
            base_url=self._base_url,
            project=self._project,
            app_name=self._app_name,
            authenticator=self._authenticator,
            config=config,
            middleware=self._middleware,
            tracer=self._tracer,
        )
