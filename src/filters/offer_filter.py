# src/filters/offer_filter.py

"""Display-side filtering and ordering of comparison entries."""

import logging

from src.models.comparison import OfferWithReviews
from src.models.offer import Platform

logger = logging.getLogger("price_compare.filters")


class OfferFilter:
    """Narrow or reorder a resolved offer list for presentation."""

    @staticmethod
    def in_stock_only(
        entries: list[OfferWithReviews],
    ) -> tuple[list[OfferWithReviews], int]:
        """Drop out-of-stock offers.

        Returns the kept entries and the count removed.
        """
        kept = [e for e in entries if e.offer.in_stock]
        removed = len(entries) - len(kept)
        if removed:
            logger.info("Hid %d out-of-stock offers", removed)
        return kept, removed

    @staticmethod
    def by_platforms(
        entries: list[OfferWithReviews],
        platform_ids: list[str],
    ) -> list[OfferWithReviews]:
        """Keep offers whose platform is in *platform_ids*.

        An empty selection keeps everything.
        """
        if not platform_ids:
            return entries
        wanted = {Platform.from_tag(p) for p in platform_ids}
        return [e for e in entries if e.offer.platform in wanted]

    @staticmethod
    def sort_by_price(
        entries: list[OfferWithReviews],
    ) -> list[OfferWithReviews]:
        """Cheapest first; ties keep their current order."""
        return sorted(entries, key=lambda e: e.price)

    @staticmethod
    def sort_by_rating(
        entries: list[OfferWithReviews],
    ) -> list[OfferWithReviews]:
        """Best rated first; unrated offers sink to the bottom."""
        rated = [e for e in entries if e.offer.rating is not None]
        unrated = [e for e in entries if e.offer.rating is None]
        rated.sort(key=lambda e: e.offer.rating or 0, reverse=True)
        return rated + unrated
