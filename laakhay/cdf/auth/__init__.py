"""Authentication for API requests."""

from .authenticator import (
    Authenticator,
    AuthTicketAuthenticator,
    CustomAuthenticator,
    FixedTokenAuthenticator,
    OIDCAuthenticator,
)

__all__ = [
    "Authenticator",
    "OIDCAuthenticator",
    "FixedTokenAuthenticator",
    "AuthTicketAuthenticator",
    "CustomAuthenticator",
]
