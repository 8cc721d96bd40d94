"""Marketplace endpoints."""

from fastapi import APIRouter, Depends, Query

from carboniq.api.dependencies import get_farm_store
from carboniq.api.models import MarketplaceResponse
from carboniq.config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MarketplaceSort
from carboniq.infrastructure.database import FarmStore
from carboniq.services.marketplace import MarketplaceService

router = APIRouter()


@router.get("", response_model=MarketplaceResponse)
async def marketplace(
    search: str | None = Query(None, description="Match against name, crops and practices"),
    crop: str | None = Query(None, description="Crop type, or 'all'"),
    sort: MarketplaceSort = Query(MarketplaceSort.NEWEST),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Maximum farms returned"),
    store: FarmStore = Depends(get_farm_store),  # noqa: B008
) -> MarketplaceResponse:
    """Verified farms offering carbon credits."""
    svc = MarketplaceService(store)
    return await svc.listing(search=search, crop=crop, sort=sort, limit=limit)
