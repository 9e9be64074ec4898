# src/models/comparison.py

"""Comparison models: the persisted record and the aggregated view."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.models.offer import Offer
from src.models.product import Product
from src.models.review import Review


@dataclass
class Comparison:
    """A saved comparison: which offers a user lined up for a product."""

    id: str
    product_id: str
    offer_ids: list[str] = field(default_factory=lambda: list[str]())
    user_id: str | None = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class OfferWithReviews:
    """An offer plus its most recent reviews."""

    offer: Offer
    reviews: list[Review] = field(default_factory=lambda: list[Review]())

    @property
    def id(self) -> str:
        return self.offer.id

    @property
    def price(self) -> Decimal:
        return self.offer.price


@dataclass
class ComparisonResult:
    """One product compared across a set of resolved offers.

    ``dropped_count`` records how many requested ids did not resolve.
    It is for logging only and is not part of the serialised result.
    """

    product: Product
    offers: list[OfferWithReviews] = field(
        default_factory=lambda: list[OfferWithReviews]()
    )
    best_deal: OfferWithReviews | None = None
    dropped_count: int = 0
