"""Laakhay CDF - Async client for paginated, resource-oriented HTTP APIs."""

from .auth import (
    Authenticator,
    AuthTicketAuthenticator,
    CustomAuthenticator,
    FixedTokenAuthenticator,
    OIDCAuthenticator,
)
from .client import CdfClient, ClientBuilder
from .core import (
    ApiError,
    AuthenticatorError,
    BadRequestError,
    CdfError,
    ClientConfig,
    ConfigError,
    ConflictError,
    DecodeError,
    ErrorKind,
    ForbiddenError,
    HttpMethod,
    NotFoundError,
    OtherApiError,
    RateLimitError,
    ServerError,
    TransportError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from .core.config import SDK_VERSION
from .models import (
    CogniteExternalId,
    CogniteId,
    Filter,
    Identity,
    Items,
    ItemsWithCursor,
    ItemsWithIgnoreUnknownIds,
    LimitCursorQuery,
    Partition,
    PartitionedFilter,
    Patch,
    Search,
    UpdateList,
    UpdateMap,
    UpdateSet,
    UpdateSetNull,
)
from .resources import Capability, Resource
from .runtime import Backoff, CursorStream, RetryMiddleware, collect, merge_streams
from .runtime.rest import (
    LoggingTracer,
    Middleware,
    RequestContext,
    RequestObservation,
    RequestTracer,
)

__version__ = SDK_VERSION

__all__ = [
    "__version__",
    # Client
    "CdfClient",
    "ClientBuilder",
    "ClientConfig",
    # Auth
    "Authenticator",
    "OIDCAuthenticator",
    "FixedTokenAuthenticator",
    "AuthTicketAuthenticator",
    "CustomAuthenticator",
    # Models
    "Identity",
    "CogniteId",
    "CogniteExternalId",
    "Items",
    "ItemsWithCursor",
    "ItemsWithIgnoreUnknownIds",
    "Patch",
    "UpdateSet",
    "UpdateSetNull",
    "UpdateList",
    "UpdateMap",
    "Partition",
    "Filter",
    "PartitionedFilter",
    "Search",
    "LimitCursorQuery",
    # Resources
    "Resource",
    "Capability",
    # Runtime
    "Backoff",
    "RetryMiddleware",
    "CursorStream",
    "collect",
    "merge_streams",
    "Middleware",
    "RequestContext",
    "RequestTracer",
    "RequestObservation",
    "LoggingTracer",
    # Enums
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
]
