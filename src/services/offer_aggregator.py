# src/services/offer_aggregator.py

"""Aggregates one product's offers and reviews and picks the best deal."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Protocol, TypeVar

from src.config.settings import Settings
from src.models.comparison import (
    Comparison,
    ComparisonResult,
    OfferWithReviews,
)
from src.models.product import Product
from src.services.errors import (
    InvalidArgument,
    NotFound,
    PriceCompareError,
    StoreUnavailable,
    Unresolvable,
)
from src.services.interfaces import CatalogStore, ReviewStore

logger = logging.getLogger("price_compare.aggregator")

T = TypeVar("T")


class _Priced(Protocol):
    @property
    def price(self) -> Decimal: ...


P = TypeVar("P", bound=_Priced)


def select_best_deal(offers: Sequence[P]) -> P | None:
    """Return the cheapest offer, the earliest one on a price tie.

    Prices are ``Decimal`` so the comparison is exact.
    """
    best: P | None = None
    for offer in offers:
        if best is None or offer.price < best.price:
            best = offer
    return best


def validate_search_query(query: str) -> str:
    """Trim *query* and enforce the minimum search length."""
    trimmed = query.strip()
    if len(trimmed) < Settings.MIN_QUERY_LENGTH:
        raise InvalidArgument(
            "Search query must be at least "
            f"{Settings.MIN_QUERY_LENGTH} characters long"
        )
    return trimmed


class OfferAggregator:
    """Builds comparison views from a catalog store and a review store."""

    def __init__(
        self,
        catalog: CatalogStore,
        reviews: ReviewStore,
        timeout: float | None = None,
    ) -> None:
        self.catalog = catalog
        self.reviews = reviews
        self.timeout = (
            timeout if timeout is not None else Settings.STORE_CALL_TIMEOUT
        )

    # ── Private helpers ──────────────────────────────────

    async def _call(self, fn: Callable[..., T], *args: object) -> T:
        """Run a blocking store call on a thread, bounded by the timeout."""
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args), timeout=self.timeout
        )

    async def _load_product(self, product_id: str) -> Product:
        try:
            return await self._call(self.catalog.get_product, product_id)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Product lookup for %s timed out after %.1fs",
                product_id,
                self.timeout,
            )
            raise NotFound("Product", product_id) from exc

    async def _resolve_one(self, offer_id: str) -> OfferWithReviews:
        """Resolve one offer and attach its reviews.

        Raises ``Unresolvable`` when the offer is missing or its lookup
        times out. A review timeout keeps the offer with no reviews.
        """
        try:
            offer = await self._call(self.catalog.get_offer, offer_id)
        except (NotFound, asyncio.TimeoutError) as exc:
            raise Unresolvable(offer_id) from exc

        try:
            reviews = await self._call(
                self.reviews.get_reviews_for_offer,
                offer.id,
                Settings.REVIEW_PAGE_SIZE,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Review lookup for offer %s timed out, "
                "returning it without reviews",
                offer.id,
            )
            reviews = []
        return OfferWithReviews(offer=offer, reviews=list(reviews))

    # ── Public operations ────────────────────────────────

    async def aggregate(
        self, product_id: str, offer_ids: Sequence[str],
    ) -> ComparisonResult:
        """Compare *product_id* across the caller-supplied *offer_ids*.

        Unresolvable ids are dropped without error, the survivors keep
        their input order, and any other store failure propagates.
        """
        product = await self._load_product(product_id)

        outcomes = await asyncio.gather(
            *(self._resolve_one(oid) for oid in offer_ids),
            return_exceptions=True,
        )

        resolved: list[OfferWithReviews] = []
        dropped = 0
        for offer_id, outcome in zip(offer_ids, outcomes):
            if isinstance(outcome, OfferWithReviews):
                resolved.append(outcome)
            elif isinstance(outcome, Unresolvable):
                dropped += 1
                logger.debug("Dropped unresolvable offer %s", offer_id)
            elif isinstance(outcome, BaseException):
                raise outcome

        if dropped:
            logger.info(
                "Comparison for %s dropped %d of %d offers",
                product_id,
                dropped,
                len(offer_ids),
            )

        return ComparisonResult(
            product=product,
            offers=resolved,
            best_deal=select_best_deal(resolved),
            dropped_count=dropped,
        )

    async def compare(
        self,
        product_id: str,
        offer_ids: Sequence[str],
        user_id: str | None = None,
        record: bool = True,
    ) -> ComparisonResult:
        """Aggregate, then save the comparison.

        A store error or timeout while saving is logged and the result is
        still returned.
        """
        result = await self.aggregate(product_id, offer_ids)
        if record:
            comparison = Comparison(
                id="",
                product_id=product_id,
                offer_ids=list(offer_ids),
                user_id=user_id,
            )
            try:
                await self._call(self.catalog.create_comparison, comparison)
            except (PriceCompareError, asyncio.TimeoutError) as exc:
                logger.warning(
                    "Could not record comparison for %s: %s",
                    product_id,
                    exc,
                    exc_info=True,
                )
        return result

    async def search(self, query: str) -> list[Product]:
        """Find products whose name, description or brand contain *query*."""
        trimmed = validate_search_query(query)
        try:
            products = await self._call(
                self.catalog.search_products, trimmed, Settings.SEARCH_LIMIT
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Search '%s' timed out after %.1fs", trimmed, self.timeout,
            )
            raise StoreUnavailable(
                f"search timed out after {self.timeout:.1f}s"
            ) from exc
        logger.info(
            "Search '%s' matched %d products", trimmed, len(products),
        )
        return products
