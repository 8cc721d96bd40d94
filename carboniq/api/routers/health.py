"""Health and catalogue endpoints."""

from fastapi import APIRouter, Depends

from carboniq.api.dependencies import get_settings_dependency
from carboniq.api.models import CatalogResponse, HealthResponse
from carboniq.config.constants import CROP_TYPES, FARMING_PRACTICES
from carboniq.config.settings import Settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> HealthResponse:
    """Service liveness."""
    return HealthResponse(status="ok", version=settings.app_version)


@router.get("/catalog", response_model=CatalogResponse)
async def catalog() -> CatalogResponse:
    """Crop types and farming practices offered by the submission form."""
    return CatalogResponse(
        crop_types=list(CROP_TYPES),
        farming_practices=list(FARMING_PRACTICES),
    )
