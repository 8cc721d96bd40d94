"""Marketplace listing service."""

import logging

from fastapi import HTTPException

from carboniq.api.models import MarketplaceFarm, MarketplaceResponse
from carboniq.config.constants import DEFAULT_PAGE_SIZE, MarketplaceSort, VerificationStatus
from carboniq.infrastructure.database import FarmStore, RecordStoreError
from carboniq.services.verification import round_credits

logger = logging.getLogger(__name__)

_ALL_CROPS = "all"


def _matches(farm: MarketplaceFarm, term: str) -> bool:
    return (
        term in farm.name.lower()
        or any(term in crop.lower() for crop in farm.crop_types)
        or any(term in practice.lower() for practice in farm.farming_practices)
    )


def filter_and_sort(
    farms: list[MarketplaceFarm],
    search: str | None = None,
    crop: str | None = None,
    sort: MarketplaceSort = MarketplaceSort.NEWEST,
) -> list[MarketplaceFarm]:
    """Apply the search term, crop filter and sort order to a listing."""
    filtered = list(farms)

    if search:
        term = search.lower()
        filtered = [f for f in filtered if _matches(f, term)]

    if crop and crop != _ALL_CROPS:
        filtered = [f for f in filtered if crop in f.crop_types]

    if sort == MarketplaceSort.NEWEST:
        filtered.sort(key=lambda f: f.created_at.timestamp() if f.created_at else 0, reverse=True)
    elif sort == MarketplaceSort.CREDITS_HIGH:
        filtered.sort(key=lambda f: f.carbon_credits, reverse=True)
    elif sort == MarketplaceSort.CREDITS_LOW:
        filtered.sort(key=lambda f: f.carbon_credits)
    elif sort == MarketplaceSort.CONFIDENCE:
        filtered.sort(key=lambda f: f.confidence_score, reverse=True)

    return filtered


class MarketplaceService:
    """Lists verified farms for credit buyers."""

    def __init__(self, store: FarmStore) -> None:
        self.store = store

    async def listing(
        self,
        search: str | None = None,
        crop: str | None = None,
        sort: MarketplaceSort = MarketplaceSort.NEWEST,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> MarketplaceResponse:
        """Verified farms with credits, filtered and sorted, plus totals.

        Only the first ``limit`` matches are returned; totals and the crop
        list cover every verified farm.
        """
        try:
            rows = await self.store.list_farms(
                status=VerificationStatus.VERIFIED, require_credits=True
            )
        except RecordStoreError as e:
            logger.error("Error fetching marketplace farms: %s", e, exc_info=True)
            raise HTTPException(status_code=502, detail="Error fetching marketplace farms") from e

        farms = [MarketplaceFarm.from_db_row(r) for r in rows]
        crop_types = list(dict.fromkeys(c for f in farms for c in f.crop_types))

        return MarketplaceResponse(
            farms=filter_and_sort(farms, search=search, crop=crop, sort=sort)[:limit],
            total_farms=len(farms),
            total_credits=round_credits(sum(f.carbon_credits for f in farms)),
            crop_types=crop_types,
        )
