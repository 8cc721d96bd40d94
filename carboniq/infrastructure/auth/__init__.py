"""Authentication providers."""

from carboniq.infrastructure.auth.provider import (
    AuthenticationError,
    AuthProvider,
    StaticTokenAuthProvider,
    SupabaseAuthProvider,
    UserIdentity,
    create_auth_provider,
)

__all__ = [
    "AuthProvider",
    "AuthenticationError",
    "StaticTokenAuthProvider",
    "SupabaseAuthProvider",
    "UserIdentity",
    "create_auth_provider",
]
