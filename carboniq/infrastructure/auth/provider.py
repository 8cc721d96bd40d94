"""Bearer token authentication."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from carboniq.config.settings import Settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """The presented token does not identify a user."""


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated session owner."""

    id: str
    email: str | None = None
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or self.id


class AuthProvider(ABC):
    """Resolves a bearer token into a user identity."""

    @abstractmethod
    async def authenticate(self, token: str) -> UserIdentity:
        """Return the token's owner or raise AuthenticationError."""

    async def close(self) -> None:
        """Release any held resources."""


class StaticTokenAuthProvider(AuthProvider):
    """Fixed token-to-user map taken from settings."""

    def __init__(self, tokens: dict[str, str]):
        self.tokens = dict(tokens)

    async def authenticate(self, token: str) -> UserIdentity:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise AuthenticationError("Unknown token")
        return UserIdentity(id=user_id)


class SupabaseAuthProvider(AuthProvider):
    """Validates access tokens against Supabase Auth."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=f"{settings.supabase_url.rstrip('/')}/auth/v1",
            headers={"apikey": settings.supabase_anon_key},
            timeout=settings.store_timeout,
        )

    async def authenticate(self, token: str) -> UserIdentity:
        try:
            response = await self._client.get(
                "/user", headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as e:
            logger.error("Supabase auth transport error: %s", e)
            raise AuthenticationError("Authentication service unavailable") from e

        if response.status_code != 200:
            logger.info("Supabase rejected token with status %s", response.status_code)
            raise AuthenticationError("Invalid or expired token")

        data = response.json()
        metadata = data.get("user_metadata") or {}
        return UserIdentity(
            id=data["id"],
            email=data.get("email"),
            full_name=metadata.get("full_name"),
        )

    async def close(self) -> None:
        await self._client.aclose()


def create_auth_provider(settings: Settings) -> AuthProvider:
    """Build the provider selected by ``auth_backend``."""
    if settings.auth_backend == "supabase":
        return SupabaseAuthProvider(settings)
    if not settings.static_auth_tokens:
        logger.warning("auth_backend is 'static' but no static_auth_tokens are configured")
    return StaticTokenAuthProvider(settings.static_auth_tokens)
