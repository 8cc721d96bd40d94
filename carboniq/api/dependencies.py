"""FastAPI dependencies."""

import random
from functools import lru_cache

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from carboniq.config.settings import Settings, get_settings
from carboniq.infrastructure.auth import (
    AuthenticationError,
    AuthProvider,
    UserIdentity,
    create_auth_provider,
)
from carboniq.infrastructure.database import FarmStore, create_farm_store
from carboniq.services.verification import VerificationEngine

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings as a FastAPI dependency."""
    return get_settings()


@lru_cache
def get_farm_store() -> FarmStore:
    """Shared record store for the process."""
    return create_farm_store(get_settings())


@lru_cache
def get_auth_provider() -> AuthProvider:
    """Shared authentication provider for the process."""
    return create_auth_provider(get_settings())


@lru_cache
def get_verification_engine() -> VerificationEngine:
    """Shared verification engine; seeded only when verification_seed is set."""
    settings = get_settings()
    return VerificationEngine(
        rng=random.Random(settings.verification_seed),
        delay_seconds=settings.verification_delay_seconds,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),  # noqa: B008
    auth: AuthProvider = Depends(get_auth_provider),  # noqa: B008
) -> UserIdentity:
    """Resolve the bearer token into the calling user, or answer 401."""
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await auth.authenticate(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
