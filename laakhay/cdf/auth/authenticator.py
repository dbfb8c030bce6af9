"""Authenticators: produce auth headers for outgoing requests.

Architecture:
    The auth middleware calls `set_headers` before each request, passing a
    `send` callable that issues requests through the same HTTP client (the
    middleware makes sure those requests are not authenticated themselves).
    After a 401 response it calls `invalidate` so the next attempt obtains a
    fresh credential.

Design Decisions:
    - The OIDC token cache is the only shared mutable state in the client; it
      is refreshed under an asyncio.Lock with a double-checked expiry so that
      concurrent requests trigger a single token request
    - Tokens are reused until 60 seconds before they expire

Implementations:
    - OIDCAuthenticator: OAuth2 client-credentials flow
    - FixedTokenAuthenticator: Static bearer token
    - AuthTicketAuthenticator: Static `auth-ticket` header
    - CustomAuthenticator: User callback (sync or async)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode

from multidict import CIMultiDict
from pydantic import BaseModel, ValidationError

from ..core.enums import HttpMethod
from ..core.exceptions import AuthenticatorError, TransportError
from ..runtime.rest.messages import HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)

Send = Callable[[HTTPRequest], Awaitable[HTTPResponse]]

EXPIRY_MARGIN_SECONDS = 60


@runtime_checkable
class Authenticator(Protocol):
    async def set_headers(self, headers: CIMultiDict[str], send: Send) -> None:
        """Add authentication headers, using `send` for any requests needed to obtain them."""
        ...

    def invalidate(self) -> None:
        """Drop any cached credential; called after a 401 response."""
        ...


class TokenResponse(BaseModel):
    access_token: str
    expires_in: int
    token_type: str | None = None


class TokenErrorResponse(BaseModel):
    error: str
    error_description: str | None = None
    error_uri: str | None = None


class OIDCAuthenticator:
    """OAuth2 client-credentials authenticator.

    Example:
        >>> auth = OIDCAuthenticator(
        ...     client_id="my-client",
        ...     client_secret="secret",
        ...     token_url="https://login.example.com/oauth2/token",
        ...     scopes="https://api.cognitedata.com/.default",
        ... )
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        *,
        resource: str | None = None,
        audience: str | None = None,
        scopes: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client_id = client_id
        self.token_url = token_url
        self.resource = resource
        self.audience = audience
        self.scopes = scopes
        self._client_secret = client_secret
        self._clock = clock
        self._lock = asyncio.Lock()
        self._token: TokenResponse | None = None
        self._fetched_at = 0.0

    async def set_headers(self, headers: CIMultiDict[str], send: Send) -> None:
        token = await self.get_token(send)
        headers["Authorization"] = f"Bearer {token}"

    def invalidate(self) -> None:
        self._token = None

    def _valid(self) -> str | None:
        token = self._token
        if (
            token is not None
            and self._fetched_at + token.expires_in > self._clock() + EXPIRY_MARGIN_SECONDS
        ):
            return token.access_token
        return None

    async def get_token(self, send: Send) -> str:
        """Return a cached token, or fetch a new one if it expires within 60 seconds."""
        cached = self._valid()
        if cached is not None:
            return cached

        async with self._lock:
            # Another task may have refreshed while we waited for the lock.
            cached = self._valid()
            if cached is not None:
                return cached

            now = self._clock()
            token = await self._request_token(send)
            self._token = token
            self._fetched_at = now
            logger.debug(
                "token_refreshed",
                extra={"token_url": self.token_url, "expires_in": token.expires_in},
            )
            return token.access_token

    def _form(self) -> dict[str, str]:
        form = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self._client_secret,
        }
        if self.resource is not None:
            form["resource"] = self.resource
        if self.audience is not None:
            form["audience"] = self.audience
        if self.scopes is not None:
            form["scope"] = self.scopes
        return form

    async def _request_token(self, send: Send) -> TokenResponse:
        request = HTTPRequest(
            method=HttpMethod.POST,
            url=self.token_url,
            headers=CIMultiDict(
                {"Content-Type": "application/x-www-form-urlencoded", "Accept": "application/json"}
            ),
            body=urlencode(self._form()).encode("utf-8"),
        )
        try:
            response = await send(request)
        except TransportError as e:
            raise AuthenticatorError(
                "Something went wrong when sending the request", str(e)
            ) from e

        if response.status != 200:
            try:
                error = TokenErrorResponse.model_validate_json(response.body)
            except ValidationError as e:
                raise AuthenticatorError(
                    f"Something went wrong (status: {response.status}), "
                    "but the response error couldn't be deserialized",
                    str(e),
                ) from e
            raise AuthenticatorError(error.error, error.error_description, error.error_uri)

        try:
            return TokenResponse.model_validate_json(response.body)
        except ValidationError as e:
            raise AuthenticatorError("Failed to deserialize", str(e)) from e


class FixedTokenAuthenticator:
    """Send a fixed bearer token."""

    def __init__(self, token: str) -> None:
        self._token = token

    async def set_headers(self, headers: CIMultiDict[str], send: Send) -> None:
        headers["Authorization"] = f"Bearer {self._token}"

    def invalidate(self) -> None:
        pass


class AuthTicketAuthenticator:
    """Send a fixed `auth-ticket` header."""

    def __init__(self, ticket: str) -> None:
        self._ticket = ticket

    async def set_headers(self, headers: CIMultiDict[str], send: Send) -> None:
        headers["auth-ticket"] = self._ticket

    def invalidate(self) -> None:
        pass


HeaderCallback = Callable[[CIMultiDict[str], Send], Any]


class CustomAuthenticator:
    """Delegate to a callback `(headers, send)`, which may be sync or async."""

    def __init__(
        self, callback: HeaderCallback, on_invalidate: Callable[[], None] | None = None
    ) -> None:
        self._callback = callback
        self._on_invalidate = on_invalidate

    async def set_headers(self, headers: CIMultiDict[str], send: Send) -> None:
        result = self._callback(headers, send)
        if inspect.isawaitable(result):
            await result

    def invalidate(self) -> None:
        if self._on_invalidate is not None:
            self._on_invalidate()
