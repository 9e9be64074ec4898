# src/models/schemas.py

"""Request schemas for create endpoints and the compare call.

Bodies arrive as decoded JSON with camelCase keys. Each schema checks
types strictly (no ``"3"`` for an integer, no ``1`` for a boolean) and
builds the matching unsaved domain model with an empty id.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    StringConstraints,
    field_validator,
)

from src.models.category import Category
from src.models.money import parse_optional_money
from src.models.offer import Offer
from src.models.product import Product
from src.models.review import Review
from src.services.errors import InvalidArgument

NonBlank = Annotated[
    StrictStr, StringConstraints(strip_whitespace=True, min_length=1)
]


def _to_money(value: object) -> object:
    """Exact two-place Decimal; floats and junk become validation errors."""
    try:
        return parse_optional_money(value, "amount")
    except InvalidArgument as exc:
        raise ValueError(str(exc)) from exc


Money = Annotated[Decimal, BeforeValidator(_to_money)]
OptionalMoney = Annotated[Decimal | None, BeforeValidator(_to_money)]


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ProductCreate(_Schema):
    name: NonBlank
    category: NonBlank
    description: StrictStr | None = None
    brand: StrictStr | None = None
    image: StrictStr | None = None

    def to_product(self) -> Product:
        return Product(
            id="",
            name=self.name,
            category=self.category,
            description=self.description,
            brand=self.brand,
            image=self.image,
        )


class OfferCreate(_Schema):
    """A new listing; the product id comes from the URL, not the body."""

    platform: NonBlank
    platform_product_id: NonBlank = Field(alias="platformProductId")
    url: NonBlank
    price: Annotated[Money, Field(ge=0)]
    original_price: OptionalMoney = Field(default=None, alias="originalPrice")
    shipping_days: StrictInt | None = Field(default=None, alias="shippingDays")
    shipping_cost: OptionalMoney = Field(default=None, alias="shippingCost")
    in_stock: StrictBool = Field(default=True, alias="inStock")
    rating: OptionalMoney = None
    review_count: StrictInt | None = Field(default=None, alias="reviewCount")
    features: list[StrictStr] | None = None

    @field_validator("rating")
    @classmethod
    def _rating_in_range(cls, value: Decimal | None) -> Decimal | None:
        if value is not None and not Decimal(0) <= value <= Decimal(5):
            raise ValueError("rating must be between 0 and 5")
        return value

    def to_offer(self, product_id: str) -> Offer:
        return Offer(
            id="",
            product_id=product_id,
            platform_tag=self.platform,
            platform_product_id=self.platform_product_id,
            url=self.url,
            price=self.price,
            original_price=self.original_price,
            shipping_days=self.shipping_days,
            shipping_cost=self.shipping_cost,
            in_stock=self.in_stock,
            rating=self.rating,
            review_count=self.review_count or 0,
            features=list(self.features or []),
        )


class ReviewCreate(_Schema):
    text: NonBlank = Field(alias="reviewText")
    rating: StrictInt
    reviewer_name: StrictStr | None = Field(default=None, alias="reviewerName")
    sentiment: StrictStr | None = None
    helpful: StrictBool | None = False

    def to_review(self, offer_id: str) -> Review:
        return Review(
            id="",
            offer_id=offer_id,
            text=self.text,
            rating=self.rating,
            reviewer_name=self.reviewer_name,
            sentiment=self.sentiment,
            helpful=self.helpful,
        )


class CategoryCreate(_Schema):
    name: NonBlank
    slug: NonBlank
    icon: NonBlank
    description: StrictStr | None = None
    is_popular: StrictBool = Field(default=False, alias="isPopular")

    def to_category(self) -> Category:
        return Category(
            id="",
            name=self.name,
            slug=self.slug,
            icon=self.icon,
            description=self.description,
            is_popular=self.is_popular,
        )


class CompareRequest(_Schema):
    """Body of ``POST /api/compare``."""

    product_id: NonBlank = Field(alias="productId")
    listing_ids: list[StrictStr] = Field(alias="listingIds")
    user_id: StrictStr | None = Field(default=None, alias="userId")
