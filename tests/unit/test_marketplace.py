"""Tests for the marketplace listing."""

import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from carboniq.api.models import MarketplaceFarm
from carboniq.config.constants import MarketplaceSort
from carboniq.infrastructure.database import RecordStoreError
from carboniq.services.marketplace import MarketplaceService, filter_and_sort


def _farm(farm_id, name, crops, practices, credits, confidence, day):
    return MarketplaceFarm(
        id=farm_id,
        user_id="user-1",
        name=name,
        land_size=1.0,
        crop_types=crops,
        farming_practices=practices,
        carbon_credits=credits,
        confidence_score=confidence,
        created_at=datetime(2024, 5, day, tzinfo=timezone.utc),
    )


@pytest.fixture
def farms():
    return [
        _farm("a", "Green Valley", ["Maize", "Beans"], ["Composting", "Agroforestry"], 1.2, 0.91, 1),
        _farm("b", "Sunrise Coffee", ["Coffee"], ["Agroforestry", "Cover cropping"], 4.8, 0.86, 3),
        _farm("c", "Riverbend", ["Rice", "Maize"], ["No-till farming", "Crop rotation"], 2.5, 0.94, 2),
    ]


class TestFilterAndSort:
    def test_default_is_newest_first(self, farms):
        assert [f.id for f in filter_and_sort(farms)] == ["b", "c", "a"]

    @pytest.mark.parametrize(
        "sort, expected",
        [
            (MarketplaceSort.CREDITS_HIGH, ["b", "c", "a"]),
            (MarketplaceSort.CREDITS_LOW, ["a", "c", "b"]),
            (MarketplaceSort.CONFIDENCE, ["c", "a", "b"]),
        ],
    )
    def test_sort_orders(self, farms, sort, expected):
        assert [f.id for f in filter_and_sort(farms, sort=sort)] == expected

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("VALLEY", ["a"]),
            ("coffee", ["b"]),
            ("agroforestry", ["b", "a"]),
            ("maize", ["c", "a"]),
            ("nothing like this", []),
        ],
    )
    def test_search_is_case_insensitive(self, farms, term, expected):
        assert [f.id for f in filter_and_sort(farms, search=term)] == expected

    def test_crop_filter_is_exact(self, farms):
        assert [f.id for f in filter_and_sort(farms, crop="Maize")] == ["c", "a"]
        assert filter_and_sort(farms, crop="maize") == []
        assert len(filter_and_sort(farms, crop="all")) == 3

    def test_input_is_not_reordered(self, farms):
        filter_and_sort(farms, sort=MarketplaceSort.CREDITS_LOW)
        assert [f.id for f in farms] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_listing_only_includes_verified(store):
    base = {"user_id": "user-1", "land_size": 1.0, "farming_practices": ["Composting"]}
    verified = await store.create_farm({**base, "name": "Verified", "crop_types": ["Tea", "Maize"]})
    await store.apply_verification(
        verified["id"],
        {"verification_status": "verified", "carbon_credits": 0.6, "confidence_score": 0.9},
    )
    rejected = await store.create_farm({**base, "name": "Rejected", "crop_types": ["Cotton"]})
    await store.apply_verification(
        rejected["id"],
        {"verification_status": "rejected", "rejection_reasons": ["Invalid or missing GPS coordinates"]},
    )
    await store.create_farm({**base, "name": "Pending", "crop_types": ["Rice"]})

    listing = await MarketplaceService(store).listing()
    assert [f.name for f in listing.farms] == ["Verified"]
    assert listing.total_farms == 1
    assert listing.total_credits == 0.6
    assert listing.crop_types == ["Tea", "Maize"]


@pytest.mark.asyncio
async def test_totals_ignore_filters(store):
    for name, crops, credits in [("One", ["Tea"], 1.0), ("Two", ["Rice"], 2.5)]:
        farm = await store.create_farm({"user_id": "u", "name": name, "land_size": 1.0, "crop_types": crops})
        await store.apply_verification(
            farm["id"],
            {"verification_status": "verified", "carbon_credits": credits, "confidence_score": 0.9},
        )

    listing = await MarketplaceService(store).listing(crop="Tea")
    assert [f.name for f in listing.farms] == ["One"]
    assert listing.total_farms == 2
    assert listing.total_credits == 3.5


@pytest.mark.asyncio
async def test_limit_caps_listing_not_totals(store):
    for name, credits in [("One", 1.0), ("Two", 2.5), ("Three", 0.5)]:
        farm = await store.create_farm({"user_id": "u", "name": name, "land_size": 1.0, "crop_types": ["Tea"]})
        await store.apply_verification(
            farm["id"],
            {"verification_status": "verified", "carbon_credits": credits, "confidence_score": 0.9},
        )

    listing = await MarketplaceService(store).listing(sort=MarketplaceSort.CREDITS_HIGH, limit=2)
    assert [f.name for f in listing.farms] == ["Two", "One"]
    assert listing.total_farms == 3
    assert listing.total_credits == 4.0


@pytest.mark.asyncio
async def test_store_failure_is_logged_with_traceback(caplog):
    store = AsyncMock()
    store.list_farms.side_effect = RecordStoreError("list farm records", "down")
    with caplog.at_level(logging.ERROR, logger="carboniq.services.marketplace.service"):
        with pytest.raises(HTTPException) as exc:
            await MarketplaceService(store).listing()
    assert exc.value.status_code == 502
    assert caplog.records[-1].exc_info is not None
