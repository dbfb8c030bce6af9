"""Core enumerations shared by the transport, retry and error layers.

Architecture:
    This module defines the small set of string enums used to classify
    requests and failures. Keeping them in one place lets the retry layer,
    the error taxonomy and callers agree on the same vocabulary.

Design Decisions:
    - String enums: Easy to log and serialize
    - ErrorKind carries retry eligibility so callers don't need status tables

Key Types:
    - HttpMethod: Methods the transport knows how to send
    - ErrorKind: Failure categories surfaced by every CdfError
"""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods used by the API client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def is_idempotent(self) -> bool:
        """Whether repeating the request cannot create duplicate side effects."""
        return self != HttpMethod.POST


class ErrorKind(str, Enum):
    """Category of a failure, independent of the concrete exception type.

    Architecture:
        Every CdfError exposes a kind. Automated recovery (retry, create-or-update,
        retry-missing-as-create) switches on the kind rather than on classes.
    """

    TRANSPORT = "transport"
    DECODE = "decode"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    OTHER_API = "other_api"
    AUTHENTICATOR = "authenticator"
    CONFIG = "config"

    @property
    def retryable(self) -> bool:
        """Whether a failure of this kind may succeed if sent again later."""
        return self in (ErrorKind.TRANSPORT, ErrorKind.RATE_LIMITED, ErrorKind.SERVER_ERROR)
