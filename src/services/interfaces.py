# src/services/interfaces.py

"""Store contracts the aggregator and API handlers depend on.

Lookups are synchronous; the aggregator moves them onto worker
threads. Implementations raise ``NotFound`` for missing ids and
``StoreUnavailable`` for transport failures.
"""

from typing import Protocol

from src.models.category import Category
from src.models.comparison import Comparison
from src.models.offer import Offer
from src.models.product import Product
from src.models.review import Review


class CatalogStore(Protocol):
    """Products, offers, categories and saved comparisons."""

    def get_products(self, limit: int = 50) -> list[Product]:
        ...

    def get_product(self, product_id: str) -> Product:
        ...

    def create_product(self, product: Product) -> Product:
        ...

    def search_products(
        self, query: str, limit: int = 20,
    ) -> list[Product]:
        ...

    def get_offer(self, offer_id: str) -> Offer:
        ...

    def get_offers_for_product(self, product_id: str) -> list[Offer]:
        """Offers for a product, cheapest first."""
        ...

    def create_offer(self, offer: Offer) -> Offer:
        ...

    def get_categories(self) -> list[Category]:
        ...

    def get_popular_categories(self) -> list[Category]:
        ...

    def create_category(self, category: Category) -> Category:
        ...

    def create_comparison(self, comparison: Comparison) -> Comparison:
        ...

    def get_comparison(self, comparison_id: str) -> Comparison:
        ...

    def get_user_comparisons(self, user_id: str) -> list[Comparison]:
        """Newest first."""
        ...


class ReviewStore(Protocol):
    """Reviews keyed by offer id."""

    def get_reviews_for_offer(
        self, offer_id: str, limit: int = 10,
    ) -> list[Review]:
        """Newest first; empty list when the offer has none."""
        ...

    def create_review(self, review: Review) -> Review:
        ...
