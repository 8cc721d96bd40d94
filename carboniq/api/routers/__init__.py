"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from carboniq.api.routers.farms import router as farms_router
from carboniq.api.routers.health import router as health_router
from carboniq.api.routers.marketplace import router as marketplace_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(farms_router, prefix="/farms", tags=["farms"])
api_router.include_router(marketplace_router, prefix="/marketplace", tags=["marketplace"])
