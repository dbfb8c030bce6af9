"""Client configuration and environment loading.

This module centralizes the retry/backoff knobs consumed by the transport core
and the environment variables used to build a client without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import ConfigError

DEFAULT_BASE_URL = "https://api.cognitedata.com"
API_VERSION = "v1"
SDK_VERSION = "0.1.0"
SDK_NAME = "laakhay-cdf"

# Environment variable names
ENV_BASE_URL = "COGNITE_BASE_URL"
ENV_PROJECT = "COGNITE_PROJECT"
ENV_CLIENT_ID = "COGNITE_CLIENT_ID"
ENV_CLIENT_SECRET = "COGNITE_CLIENT_SECRET"
ENV_TOKEN_URL = "COGNITE_TOKEN_URL"
ENV_RESOURCE = "COGNITE_RESOURCE"
ENV_AUDIENCE = "COGNITE_AUDIENCE"
ENV_SCOPES = "COGNITE_SCOPES"

MAX_RETRIES_LIMIT = 10


@dataclass(frozen=True)
class ClientConfig:
    """Transport configuration.

    Attributes:
        max_retries: Maximum number of retries per request (capped at 10, 0 disables retries)
        initial_backoff: First retry delay in seconds
        max_backoff: Upper bound for any retry delay in seconds
        jitter: Jitter factor; each delay moves by up to +/- jitter * delay
        timeout: Total request timeout in seconds (None for aiohttp's default)
    """

    max_retries: int = 5
    initial_backoff: float = 0.125
    max_backoff: float = 300.0
    jitter: float = 0.25
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigError("max_retries must be >= 0")
        if self.initial_backoff < 0 or self.max_backoff < 0:
            raise ConfigError("Backoff delays must be >= 0")
        if not 0 <= self.jitter <= 1:
            raise ConfigError("jitter must be between 0 and 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("timeout must be positive")

    @property
    def effective_max_retries(self) -> int:
        return min(self.max_retries, MAX_RETRIES_LIMIT)


def api_root(base_url: str, project: str) -> str:
    """Build the project-scoped API root.

    Examples:
        >>> api_root("https://api.cognitedata.com/", "my-project")
        'https://api.cognitedata.com/api/v1/projects/my-project'
    """
    if not project:
        raise ConfigError("Project is required")
    return f"{base_url.rstrip('/')}/api/{API_VERSION}/projects/{project}"


def env_or_error(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise ConfigError(f"{name} is not defined in the environment")
    return value


def env_or(name: str, default: str) -> str:
    return os.environ.get(name, default)


def env_or_none(name: str) -> str | None:
    return os.environ.get(name)
