"""Marketplace listing."""

from carboniq.services.marketplace.service import MarketplaceService, filter_and_sort

__all__ = ["MarketplaceService", "filter_and_sort"]
