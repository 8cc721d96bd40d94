"""FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carboniq.api.dependencies import get_auth_provider, get_farm_store
from carboniq.api.routers import api_router
from carboniq.config.settings import Settings, get_settings
from carboniq.infrastructure.logging.logger import setup_logging

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    if settings.store_backend == "memory":
        logger.warning("Using the in-memory farm store; records are lost on restart")
    if settings.auth_backend == "static" and not settings.static_auth_tokens:
        logger.warning("No static_auth_tokens configured; every farm request will be rejected")
    if settings.verification_seed is not None:
        logger.warning("verification_seed is set; verification outcomes are reproducible")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    _validate_startup_config(settings)

    yield
    logger.info("Shutting down %s", settings.app_name)
    try:
        await get_farm_store().close()
        logger.info("Farm store closed")
    except Exception as e:
        logger.error("Error closing farm store: %s", e, exc_info=True)
    try:
        await get_auth_provider().close()
        logger.info("Auth provider closed")
    except Exception as e:
        logger.error("Error closing auth provider: %s", e, exc_info=True)


app = FastAPI(
    title="CarbonIQ Farm Verification",
    description="Farm submissions, simulated carbon credit verification and marketplace listing",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
