# src/storage/seed_data.py

"""Sample catalog used for demos and first runs."""

import logging
import random
from decimal import ROUND_HALF_UP, Decimal

from src.config.settings import Settings
from src.models.category import Category
from src.models.offer import Offer
from src.models.product import Product
from src.models.review import Review
from src.services.interfaces import CatalogStore, ReviewStore

logger = logging.getLogger("price_compare.seed")

_CATEGORIES: list[dict[str, object]] = [
    {"name": "Electronics", "slug": "electronics", "icon": "smartphone", "popular": True},
    {"name": "Fashion", "slug": "fashion", "icon": "shirt", "popular": True},
    {"name": "Home & Garden", "slug": "home-garden", "icon": "home", "popular": True},
    {"name": "Books", "slug": "books", "icon": "book", "popular": False},
    {"name": "Sports", "slug": "sports", "icon": "dumbbell", "popular": True},
    {"name": "Gaming", "slug": "gaming", "icon": "gamepad", "popular": True},
]

# name, description, category, brand, base price (INR)
_PRODUCTS: list[tuple[str, str, str, str, int]] = [
    (
        "ASUS VivoBook 14",
        "14-inch laptop with Intel Core i5, 8GB RAM, 512GB SSD",
        "Electronics", "ASUS", 45999,
    ),
    (
        "Samsung Galaxy S24",
        "Latest flagship smartphone with AI features and 50MP camera",
        "Electronics", "Samsung", 79999,
    ),
    (
        "Nike Air Max 270",
        "Comfortable running shoes with Air Max technology",
        "Fashion", "Nike", 8999,
    ),
    (
        "iPhone 15 Pro",
        "Premium smartphone with titanium design and A17 Pro chip",
        "Electronics", "Apple", 134900,
    ),
    (
        "Sony WH-1000XM5",
        "Wireless noise-canceling headphones with premium sound quality",
        "Electronics", "Sony", 29990,
    ),
    (
        "Adidas Ultraboost 22",
        "High-performance running shoes with Boost technology",
        "Fashion", "Adidas", 16999,
    ),
]

_COMMON_FEATURES: list[str] = [
    "Free delivery",
    "1 year warranty",
    "Easy returns",
]

# text, stars, reviewer, sentiment, helpful
_REVIEWS: list[tuple[str, int, str, str, bool]] = [
    (
        "Great product, exactly as described. "
        "Fast delivery and good packaging.",
        5, "Verified Buyer", "positive", True,
    ),
    (
        "Good value for money. Minor issues but overall satisfied.",
        4, "Customer", "positive", True,
    ),
    (
        "Average product. Could be better for the price.",
        3, "User123", "neutral", False,
    ),
]


def _rupees(value: float) -> Decimal:
    return Decimal(round(value)).quantize(Decimal("0.01"))


def _build_offers(
    product: Product, base_price: int, rng: random.Random,
) -> list[Offer]:
    """One offer per platform with ±10% price and 0–30% list markup."""
    offers: list[Offer] = []
    for index, platform in enumerate(Settings.AVAILABLE_PLATFORMS):
        tag = platform["id"]
        price = _rupees(base_price * (1 + (rng.random() - 0.5) * 0.2))
        original = _rupees(float(price) * (1 + rng.random() * 0.3))
        shipping = (
            Decimal("0.00")
            if rng.random() > 0.5
            else _rupees(rng.randrange(200))
        )
        offers.append(Offer(
            id="",
            product_id=product.id,
            platform_tag=tag,
            platform_product_id=f"{tag}_{product.id}_{index}",
            url=f"https://{tag}.com/product/{product.id}",
            price=price,
            original_price=original,
            shipping_days=rng.randint(1, 7),
            shipping_cost=shipping,
            in_stock=True,
            rating=Decimal(str(3.5 + rng.random() * 1.5)).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            ),
            review_count=rng.randint(100, 5099),
            features=[*_COMMON_FEATURES, platform["badge"]],
        ))
    return offers


def seed_database(
    catalog: CatalogStore,
    reviews: ReviewStore,
    rng: random.Random | None = None,
) -> int:
    """Populate an empty catalog with sample data.

    Returns the number of products inserted; 0 if the catalog already
    had products.
    """
    if catalog.get_products(1):
        logger.info("Catalog already seeded, skipping")
        return 0

    rng = rng or random.Random()

    for entry in _CATEGORIES:
        catalog.create_category(Category(
            id="",
            name=str(entry["name"]),
            slug=str(entry["slug"]),
            icon=str(entry["icon"]),
            is_popular=bool(entry["popular"]),
        ))

    for name, description, category, brand, base_price in _PRODUCTS:
        product = catalog.create_product(Product(
            id="",
            name=name,
            description=description,
            category=category,
            brand=brand,
        ))
        for offer in _build_offers(product, base_price, rng):
            saved = catalog.create_offer(offer)
            for text, stars, reviewer, sentiment, helpful in _REVIEWS:
                reviews.create_review(Review(
                    id="",
                    offer_id=saved.id,
                    text=text,
                    rating=stars,
                    reviewer_name=reviewer,
                    sentiment=sentiment,
                    helpful=helpful,
                ))

    logger.info(
        "Seeded %d categories and %d products",
        len(_CATEGORIES),
        len(_PRODUCTS),
    )
    return len(_PRODUCTS)
