# src/api/handlers.py

"""Request handlers behind the JSON API.

Each handler takes already-decoded request data (path params, query
string values, JSON body) and returns an :class:`ApiResponse`.
``src.api.server`` mounts them on Flask routes.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from src.api.serializers import (
    category_to_dict,
    comparison_result_to_dict,
    comparison_to_dict,
    offer_to_dict,
    product_to_dict,
    review_to_dict,
)
from src.config.settings import Settings
from src.models.schemas import (
    CategoryCreate,
    CompareRequest,
    OfferCreate,
    ProductCreate,
    ReviewCreate,
)
from src.services.errors import InvalidArgument, NotFound
from src.services.interfaces import CatalogStore, ReviewStore
from src.services.offer_aggregator import OfferAggregator

logger = logging.getLogger("price_compare.api")


@dataclass
class ApiResponse:
    """HTTP status code plus a JSON-serialisable body."""

    status: int
    body: object

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _message(status: int, text: str) -> ApiResponse:
    return ApiResponse(status=status, body={"message": text})


def _describe(exc: ValidationError) -> str:
    """One line per failing field, e.g. ``price: Input should be ...``."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )


class ApiHandlers:
    """JSON API over the catalog, review store and aggregator."""

    def __init__(
        self,
        catalog: CatalogStore,
        reviews: ReviewStore,
        aggregator: OfferAggregator | None = None,
    ) -> None:
        self.catalog = catalog
        self.reviews = reviews
        self.aggregator = aggregator or OfferAggregator(catalog, reviews)

    async def _guard(
        self,
        action: Callable[[], Awaitable[ApiResponse]],
        failure: str,
        not_found: str = "Not found",
    ) -> ApiResponse:
        """Map domain errors to status codes; log anything unexpected."""
        try:
            return await action()
        except InvalidArgument as exc:
            return _message(400, str(exc))
        except ValidationError as exc:
            return _message(400, _describe(exc))
        except NotFound:
            return _message(404, not_found)
        except Exception:
            logger.error(failure, exc_info=True)
            return _message(500, failure)

    # ── Products ─────────────────────────────────────────

    async def list_products(self, limit: str | None = None) -> ApiResponse:
        """GET /api/products?limit=N"""

        async def action() -> ApiResponse:
            count = Settings.PRODUCT_LIST_LIMIT
            if limit is not None:
                try:
                    count = int(limit)
                except ValueError as exc:
                    raise InvalidArgument(
                        "limit must be a positive integer"
                    ) from exc
                if count < 1:
                    raise InvalidArgument("limit must be a positive integer")
            products = await asyncio.to_thread(
                self.catalog.get_products, count
            )
            return ApiResponse(200, [product_to_dict(p) for p in products])

        return await self._guard(action, "Failed to fetch products")

    async def search_products(self, q: str | None) -> ApiResponse:
        """GET /api/products/search?q=STRING"""

        async def action() -> ApiResponse:
            products = await self.aggregator.search(q or "")
            return ApiResponse(200, [product_to_dict(p) for p in products])

        return await self._guard(action, "Failed to search products")

    async def get_product(self, product_id: str) -> ApiResponse:
        """GET /api/products/:id"""

        async def action() -> ApiResponse:
            product = await asyncio.to_thread(
                self.catalog.get_product, product_id
            )
            return ApiResponse(200, product_to_dict(product))

        return await self._guard(
            action, "Failed to fetch product", "Product not found"
        )

    async def create_product(self, body: Any) -> ApiResponse:
        """POST /api/products"""

        async def action() -> ApiResponse:
            product = ProductCreate.model_validate(body).to_product()
            product = await asyncio.to_thread(
                self.catalog.create_product, product
            )
            return ApiResponse(201, product_to_dict(product))

        return await self._guard(action, "Failed to create product")

    # ── Listings ─────────────────────────────────────────

    async def get_product_listings(self, product_id: str) -> ApiResponse:
        """GET /api/products/:id/listings (cheapest first)"""

        async def action() -> ApiResponse:
            offers = await asyncio.to_thread(
                self.catalog.get_offers_for_product, product_id
            )
            return ApiResponse(200, [offer_to_dict(o) for o in offers])

        return await self._guard(action, "Failed to fetch product listings")

    async def create_listing(
        self, product_id: str, body: Any,
    ) -> ApiResponse:
        """POST /api/products/:id/listings"""

        async def action() -> ApiResponse:
            offer = OfferCreate.model_validate(body).to_offer(product_id)
            offer = await asyncio.to_thread(self.catalog.create_offer, offer)
            return ApiResponse(201, offer_to_dict(offer))

        return await self._guard(action, "Failed to create product listing")

    # ── Reviews ──────────────────────────────────────────

    async def get_listing_reviews(self, listing_id: str) -> ApiResponse:
        """GET /api/listings/:id/reviews (newest first)"""

        async def action() -> ApiResponse:
            reviews = await asyncio.to_thread(
                self.reviews.get_reviews_for_offer,
                listing_id,
                Settings.REVIEW_PAGE_SIZE,
            )
            return ApiResponse(200, [review_to_dict(r) for r in reviews])

        return await self._guard(action, "Failed to fetch reviews")

    async def create_review(self, listing_id: str, body: Any) -> ApiResponse:
        """POST /api/listings/:id/reviews"""

        async def action() -> ApiResponse:
            review = ReviewCreate.model_validate(body).to_review(listing_id)
            review = await asyncio.to_thread(
                self.reviews.create_review, review
            )
            return ApiResponse(201, review_to_dict(review))

        return await self._guard(action, "Failed to create review")

    # ── Categories ───────────────────────────────────────

    async def list_categories(self) -> ApiResponse:
        """GET /api/categories"""

        async def action() -> ApiResponse:
            categories = await asyncio.to_thread(self.catalog.get_categories)
            return ApiResponse(
                200, [category_to_dict(c) for c in categories]
            )

        return await self._guard(action, "Failed to fetch categories")

    async def list_popular_categories(self) -> ApiResponse:
        """GET /api/categories/popular"""

        async def action() -> ApiResponse:
            categories = await asyncio.to_thread(
                self.catalog.get_popular_categories
            )
            return ApiResponse(
                200, [category_to_dict(c) for c in categories]
            )

        return await self._guard(
            action, "Failed to fetch popular categories"
        )

    async def create_category(self, body: Any) -> ApiResponse:
        """POST /api/categories"""

        async def action() -> ApiResponse:
            category = CategoryCreate.model_validate(body).to_category()
            category = await asyncio.to_thread(
                self.catalog.create_category, category
            )
            return ApiResponse(201, category_to_dict(category))

        return await self._guard(action, "Failed to create category")

    # ── Comparison ───────────────────────────────────────

    async def compare(self, body: Any) -> ApiResponse:
        """POST /api/compare with ``{productId, listingIds: [...]}``"""

        async def action() -> ApiResponse:
            try:
                request = CompareRequest.model_validate(body)
            except ValidationError as exc:
                raise InvalidArgument("Invalid comparison data") from exc
            result = await self.aggregator.compare(
                request.product_id,
                request.listing_ids,
                user_id=request.user_id,
            )
            return ApiResponse(200, comparison_result_to_dict(result))

        return await self._guard(
            action, "Failed to create comparison", "Product not found"
        )

    async def get_comparison(self, comparison_id: str) -> ApiResponse:
        """GET /api/comparisons/:id"""

        async def action() -> ApiResponse:
            comparison = await asyncio.to_thread(
                self.catalog.get_comparison, comparison_id
            )
            return ApiResponse(200, comparison_to_dict(comparison))

        return await self._guard(
            action, "Failed to fetch comparison", "Comparison not found"
        )

    async def get_user_comparisons(self, user_id: str) -> ApiResponse:
        """GET /api/users/:id/comparisons (newest first)"""

        async def action() -> ApiResponse:
            comparisons = await asyncio.to_thread(
                self.catalog.get_user_comparisons, user_id
            )
            return ApiResponse(
                200, [comparison_to_dict(c) for c in comparisons]
            )

        return await self._guard(action, "Failed to fetch comparisons")
