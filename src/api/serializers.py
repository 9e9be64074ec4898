# src/api/serializers.py

"""Wire format for API responses and saved comparison files.

Keys are camelCase; money is a two-decimal string; timestamps are
ISO-8601.
"""

from src.models.category import Category
from src.models.comparison import (
    Comparison,
    ComparisonResult,
    OfferWithReviews,
)
from src.models.money import format_money
from src.models.offer import Offer
from src.models.product import Product
from src.models.review import Review

JSONDict = dict[str, object]


def product_to_dict(product: Product) -> JSONDict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "brand": product.brand,
        "image": product.image,
        "createdAt": product.created_at.isoformat(),
    }


def offer_to_dict(offer: Offer) -> JSONDict:
    return {
        "id": offer.id,
        "productId": offer.product_id,
        "platform": offer.platform_tag,
        "platformProductId": offer.platform_product_id,
        "url": offer.url,
        "price": format_money(offer.price),
        "originalPrice": (
            format_money(offer.original_price)
            if offer.original_price is not None
            else None
        ),
        "shippingDays": offer.shipping_days,
        "shippingCost": (
            format_money(offer.shipping_cost)
            if offer.shipping_cost is not None
            else None
        ),
        "inStock": offer.in_stock,
        "rating": (
            format_money(offer.rating) if offer.rating is not None else None
        ),
        "reviewCount": offer.review_count,
        "features": list(offer.features),
        "lastUpdated": offer.last_updated.isoformat(),
    }


def review_to_dict(review: Review) -> JSONDict:
    return {
        "id": review.id,
        "productListingId": review.offer_id,
        "reviewText": review.text,
        "rating": review.rating,
        "reviewerName": review.reviewer_name,
        "sentiment": review.sentiment,
        "helpful": review.helpful,
        "createdAt": review.created_at.isoformat(),
    }


def category_to_dict(category: Category) -> JSONDict:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "icon": category.icon,
        "description": category.description,
        "isPopular": category.is_popular,
    }


def comparison_to_dict(comparison: Comparison) -> JSONDict:
    return {
        "id": comparison.id,
        "userId": comparison.user_id,
        "productId": comparison.product_id,
        "selectedListings": list(comparison.offer_ids),
        "createdAt": comparison.created_at.isoformat(),
    }


def entry_to_dict(entry: OfferWithReviews) -> JSONDict:
    """An offer flattened together with its ``reviews`` list."""
    data = offer_to_dict(entry.offer)
    data["reviews"] = [review_to_dict(r) for r in entry.reviews]
    return data


def comparison_result_to_dict(result: ComparisonResult) -> JSONDict:
    return {
        "product": product_to_dict(result.product),
        "listings": [entry_to_dict(e) for e in result.offers],
        "bestDeal": (
            entry_to_dict(result.best_deal)
            if result.best_deal is not None
            else None
        ),
    }
