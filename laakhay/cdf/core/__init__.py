"""Core components."""

from .config import ClientConfig, api_root
from .enums import ErrorKind, HttpMethod
from .exceptions import (
    ApiError,
    AuthenticatorError,
    BadRequestError,
    CdfError,
    ConfigError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    OtherApiError,
    RateLimitError,
    ServerError,
    TransportError,
    UnauthorizedError,
    UnprocessableEntityError,
    error_class_for_status,
    get_duplicates,
    get_missing,
)

__all__ = [
    "ClientConfig",
    "api_root",
    "ErrorKind",
    "HttpMethod",
    # Exceptions
    "CdfError",
    "TransportError",
    "DecodeError",
    "ConfigError",
    "AuthenticatorError",
    "ApiError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "RateLimitError",
    "ServerError",
    "OtherApiError",
    "error_class_for_status",
    "get_duplicates",
    "get_missing",
]
