# src/models/offer.py

"""Platform offer ("listing") model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from src.config.settings import Settings


class Platform(str, Enum):
    """Known selling platforms; anything else maps to UNKNOWN."""

    AMAZON = "amazon"
    FLIPKART = "flipkart"
    MYNTRA = "myntra"
    MEESHO = "meesho"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> "Platform":
        """Map a stored platform tag onto the enum, case-insensitively."""
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        for entry in Settings.AVAILABLE_PLATFORMS:
            if entry["id"] == self.value:
                return entry["label"]
        return "Other"


@dataclass
class Offer:
    """One platform's sale instance of a product.

    ``platform_tag`` keeps whatever the store holds so unknown
    platforms survive a round trip; ``platform`` is the typed view.
    """

    id: str
    product_id: str
    platform_tag: str
    platform_product_id: str
    url: str
    price: Decimal
    original_price: Decimal | None = None
    shipping_days: int | None = None
    shipping_cost: Decimal | None = None
    in_stock: bool = True
    rating: Decimal | None = None
    review_count: int = 0
    features: list[str] = field(default_factory=lambda: list[str]())
    last_updated: datetime = field(default_factory=datetime.now)

    @property
    def platform(self) -> Platform:
        return Platform.from_tag(self.platform_tag)

    @property
    def is_free_shipping(self) -> bool:
        return self.shipping_cost is None or self.shipping_cost == 0

    @property
    def discount_percent(self) -> int | None:
        """Whole-percent markdown from the list price, if any."""
        if self.original_price is None or self.original_price <= self.price:
            return None
        saved = (self.original_price - self.price) / self.original_price
        return int((saved * 100).quantize(Decimal("1"), ROUND_HALF_UP))

    @property
    def shipping_text(self) -> str:
        if not self.shipping_days:
            return "Shipping info unavailable"
        if self.shipping_days == 1:
            return "Ships in 1 day"
        return f"Ships in {self.shipping_days} days"


def platform_label(tag: str) -> str:
    """Display label for a raw platform tag."""
    platform = Platform.from_tag(tag)
    if platform is Platform.UNKNOWN:
        return tag.strip().title() or "Other"
    return platform.label
