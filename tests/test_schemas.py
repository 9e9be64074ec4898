# tests/test_schemas.py

"""Tests for the request schemas behind the create endpoints."""

import unittest
from decimal import Decimal

from pydantic import ValidationError

from src.models.schemas import (
    CategoryCreate,
    CompareRequest,
    OfferCreate,
    ProductCreate,
    ReviewCreate,
)


def _listing_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "platform": "flipkart",
        "platformProductId": "flipkart_42",
        "url": "https://flipkart.com/product/42",
        "price": "45999.00",
    }
    payload.update(overrides)
    return payload


class TestOfferCreate(unittest.TestCase):
    """Listing bodies."""

    def test_minimal_payload(self) -> None:
        offer = OfferCreate.model_validate(_listing_payload()).to_offer("p1")
        self.assertEqual(offer.id, "")
        self.assertEqual(offer.product_id, "p1")
        self.assertEqual(offer.price, Decimal("45999.00"))
        self.assertTrue(offer.in_stock)
        self.assertEqual(offer.review_count, 0)
        self.assertEqual(offer.features, [])

    def test_full_payload(self) -> None:
        offer = OfferCreate.model_validate(_listing_payload(
            originalPrice="49999", shippingDays=3, shippingCost="0",
            inStock=False, rating="4.4", reviewCount=812,
            features=["No Cost EMI"],
        )).to_offer("p1")
        self.assertEqual(offer.original_price, Decimal("49999.00"))
        self.assertEqual(offer.shipping_days, 3)
        self.assertEqual(offer.shipping_cost, Decimal("0.00"))
        self.assertFalse(offer.in_stock)
        self.assertEqual(offer.rating, Decimal("4.40"))
        self.assertEqual(offer.review_count, 812)
        self.assertEqual(offer.features, ["No Cost EMI"])

    def test_integer_price_is_exact(self) -> None:
        offer = OfferCreate.model_validate(_listing_payload(price=1299))
        self.assertEqual(offer.price, Decimal("1299.00"))

    def test_missing_required_fields(self) -> None:
        for key in ("platform", "platformProductId", "url", "price"):
            payload = _listing_payload()
            del payload[key]
            with self.subTest(key=key):
                with self.assertRaises(ValidationError):
                    OfferCreate.model_validate(payload)

    def test_negative_price_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            OfferCreate.model_validate(_listing_payload(price="-1.00"))

    def test_float_price_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            OfferCreate.model_validate(_listing_payload(price=45999.0))

    def test_rating_out_of_range(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            OfferCreate.model_validate(_listing_payload(rating="5.5"))
        self.assertEqual(ctx.exception.errors()[0]["loc"], ("rating",))

    def test_bad_types_rejected(self) -> None:
        bad = [
            {"shippingDays": "3"},
            {"inStock": "yes"},
            {"features": "fast"},
            {"reviewCount": True},
            {"platform": "   "},
        ]
        for override in bad:
            with self.subTest(override=override):
                with self.assertRaises(ValidationError):
                    OfferCreate.model_validate(_listing_payload(**override))


class TestProductCategoryReview(unittest.TestCase):
    """Bodies for the remaining create endpoints."""

    def test_product(self) -> None:
        product = ProductCreate.model_validate(
            {"name": " Kettle ", "category": "Home", "brand": "Prestige"}
        ).to_product()
        self.assertEqual(product.id, "")
        self.assertEqual(product.name, "Kettle")
        self.assertEqual(product.brand, "Prestige")
        self.assertIsNone(product.description)

    def test_product_requires_name_and_category(self) -> None:
        for payload in ({"category": "Home"}, {"name": "  ", "category": "X"},
                        {"name": "Kettle"}, [], None):
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError):
                    ProductCreate.model_validate(payload)

    def test_category(self) -> None:
        category = CategoryCreate.model_validate({
            "name": "Books", "slug": "books", "icon": "book",
            "isPopular": True,
        }).to_category()
        self.assertTrue(category.is_popular)
        with self.assertRaises(ValidationError):
            CategoryCreate.model_validate({"name": "Books", "slug": "books"})

    def test_review(self) -> None:
        review = ReviewCreate.model_validate({
            "reviewText": "Great value", "rating": 5,
            "reviewerName": "Ravi",
        }).to_review("o1")
        self.assertEqual(review.offer_id, "o1")
        self.assertEqual(review.reviewer_name, "Ravi")
        self.assertFalse(review.helpful)
        with self.assertRaises(ValidationError):
            ReviewCreate.model_validate({"reviewText": "ok", "rating": "5"})
        with self.assertRaises(ValidationError):
            ReviewCreate.model_validate({"rating": 4})


class TestCompareRequest(unittest.TestCase):

    def test_aliases(self) -> None:
        request = CompareRequest.model_validate(
            {"productId": "p1", "listingIds": ["o1"], "userId": "u7"}
        )
        self.assertEqual(request.product_id, "p1")
        self.assertEqual(request.listing_ids, ["o1"])
        self.assertEqual(request.user_id, "u7")

    def test_user_id_optional(self) -> None:
        request = CompareRequest.model_validate(
            {"productId": "p1", "listingIds": []}
        )
        self.assertIsNone(request.user_id)


if __name__ == "__main__":
    unittest.main()
