"""Custom exception hierarchy.

Every failure the client surfaces is a CdfError carrying an ErrorKind. API
errors additionally carry the structured `missing` and `duplicated` lists from
the error body so callers can drive create-or-update flows.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from .enums import ErrorKind

if TYPE_CHECKING:
    from ..models.identity import Identity


class CdfError(Exception):
    """Base exception for all library errors."""

    kind: ErrorKind = ErrorKind.OTHER_API

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class TransportError(CdfError):
    """Connection failure, timeout or TLS failure before a response arrived.

    `connect` is true when the connection could not be established, so the
    request never reached the server.
    """

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        connect: bool = False,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.connect = connect


class DecodeError(CdfError):
    """Response body did not match the expected schema or content type."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, *, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


class ConfigError(CdfError):
    """Client configuration is missing or invalid."""

    kind = ErrorKind.CONFIG


class AuthenticatorError(CdfError):
    """Error from the authenticator or the identity provider."""

    kind = ErrorKind.AUTHENTICATOR

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        error_uri: str | None = None,
    ) -> None:
        self.error = error
        self.error_description = error_description
        self.error_uri = error_uri
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.error
        if self.error_description:
            text += f": {self.error_description}"
        if self.error_uri:
            text += f" ({self.error_uri})"
        return text


def _identities(entries: list[dict[str, Any]] | None) -> list[Identity]:
    from ..models.identity import Identity

    result: list[Identity] = []
    for entry in entries or []:
        raw_id = entry.get("id")
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            result.append(Identity.of_id(raw_id))
            continue
        if isinstance(raw_id, str):
            try:
                result.append(Identity.of_id(int(raw_id)))
                continue
            except ValueError:
                pass
        external_id = entry.get("externalId")
        if isinstance(external_id, str):
            result.append(Identity.of_external_id(external_id))
    return result


class ApiError(CdfError):
    """Error response from the API.

    Attributes:
        code: HTTP status code reported by the API
        message: Error description
        missing: Raw entries the API could not resolve
        duplicated: Raw entries that already exist
        request_id: Value of the x-request-id header, if any
    """

    status: int | None = None

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        missing: list[dict[str, Any]] | None = None,
        duplicated: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.status
        self.message = message
        self.missing = missing
        self.duplicated = duplicated
        self.request_id = request_id

    def __str__(self) -> str:
        return f"{self.code}: {self.message}. RequestId: {self.request_id or ''}"

    @property
    def missing_identities(self) -> list[Identity]:
        return _identities(self.missing)

    @property
    def duplicated_identities(self) -> list[Identity]:
        return _identities(self.duplicated)

    @classmethod
    def from_response(
        cls,
        status: int,
        body: bytes | str,
        *,
        request_id: str | None = None,
        headers: Any = None,
    ) -> ApiError:
        """Build the ApiError subclass matching `status` from an error body.

        Bodies of the form {"error": {"code", "message", "missing"?, "duplicated"?}}
        are unpacked; anything else keeps the raw text as the message.
        """
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        error_cls = error_class_for_status(status)
        kwargs: dict[str, Any] = {"code": status, "request_id": request_id}
        message = text
        try:
            parsed = json.loads(text)
        except ValueError as e:
            message = f"{e}. Raw: {text}"
        else:
            error = parsed.get("error") if isinstance(parsed, dict) else None
            if isinstance(error, dict) and "message" in error:
                message = str(error["message"])
                kwargs["code"] = error.get("code", status)
                kwargs["missing"] = error.get("missing")
                kwargs["duplicated"] = error.get("duplicated")
            else:
                message = f"Unexpected error body. Raw: {text}"

        if error_cls is RateLimitError:
            kwargs["retry_after"] = _retry_after(headers)
        return error_cls(message, **kwargs)


class BadRequestError(ApiError):
    """A bad request error (400). May carry missing identities."""

    kind = ErrorKind.BAD_REQUEST
    status = 400


class UnauthorizedError(ApiError):
    """Token is not valid for the project (401)."""

    kind = ErrorKind.UNAUTHORIZED
    status = 401


class ForbiddenError(ApiError):
    """Caller lacks access to the requested resource (403)."""

    kind = ErrorKind.FORBIDDEN
    status = 403


class NotFoundError(ApiError):
    """Not found (404). May carry missing identities."""

    kind = ErrorKind.NOT_FOUND
    status = 404


class ConflictError(ApiError):
    """Conflict (409). Carries the identities that already exist."""

    kind = ErrorKind.CONFLICT
    status = 409


class UnprocessableEntityError(ApiError):
    kind = ErrorKind.UNPROCESSABLE_ENTITY
    status = 422


class RateLimitError(ApiError):
    """API rate limit exceeded (429)."""

    kind = ErrorKind.RATE_LIMITED
    status = 429

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(ApiError):
    """Server side failure (5xx)."""

    kind = ErrorKind.SERVER_ERROR


class OtherApiError(ApiError):
    """An API error not covered by the common variants."""

    kind = ErrorKind.OTHER_API


_STATUS_CLASSES: dict[int, type[ApiError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}


def error_class_for_status(status: int) -> type[ApiError]:
    if status in _STATUS_CLASSES:
        return _STATUS_CLASSES[status]
    if 500 <= status < 600:
        return ServerError
    return OtherApiError


def _retry_after(headers: Any) -> float | None:
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def get_duplicates(error: BaseException) -> list[Identity] | None:
    """Return the duplicated identities if `error` is a conflict, else None."""
    if isinstance(error, ConflictError) and error.duplicated is not None:
        return error.duplicated_identities
    return None


def get_missing(error: BaseException) -> list[Identity] | None:
    """Return the missing identities if `error` is a bad request or not found, else None."""
    if isinstance(error, (BadRequestError, NotFoundError)) and error.missing is not None:
        return error.missing_identities
    return None
