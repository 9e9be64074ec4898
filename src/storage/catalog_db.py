# src/storage/catalog_db.py

"""SQLite-backed catalog: products, offers, categories, comparisons."""

import dataclasses
import json
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.config.settings import Settings
from src.models.category import Category
from src.models.comparison import Comparison
from src.models.money import from_minor_units, to_minor_units
from src.models.offer import Offer
from src.models.product import Product
from src.services.errors import InvalidArgument, NotFound
from src.storage.sqlite_base import SQLiteStore, from_timestamp, to_timestamp

logger = logging.getLogger("price_compare.catalog")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT,
    category    TEXT NOT NULL,
    image       TEXT,
    brand       TEXT,
    created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS product_listings (
    id                   TEXT    PRIMARY KEY,
    product_id           TEXT    NOT NULL REFERENCES products(id),
    platform             TEXT    NOT NULL,
    platform_product_id  TEXT    NOT NULL,
    url                  TEXT    NOT NULL,
    price_minor          INTEGER NOT NULL,
    original_price_minor INTEGER,
    shipping_days        INTEGER,
    shipping_cost_minor  INTEGER,
    in_stock             INTEGER NOT NULL DEFAULT 1,
    rating               TEXT,
    review_count         INTEGER NOT NULL DEFAULT 0,
    features             TEXT    NOT NULL DEFAULT '[]',
    last_updated         TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_listings_product_price
    ON product_listings(product_id, price_minor);

CREATE TABLE IF NOT EXISTS categories (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE,
    slug        TEXT NOT NULL UNIQUE,
    icon        TEXT NOT NULL,
    description TEXT,
    is_popular  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS comparisons (
    id                TEXT PRIMARY KEY,
    user_id           TEXT,
    product_id        TEXT NOT NULL REFERENCES products(id),
    selected_listings TEXT NOT NULL DEFAULT '[]',
    created_at        TEXT NOT NULL
);
"""

_PRODUCT_COLS = "id, name, description, category, image, brand, created_at"

_OFFER_COLS = (
    "id, product_id, platform, platform_product_id, url, price_minor, "
    "original_price_minor, shipping_days, shipping_cost_minor, in_stock, "
    "rating, review_count, features, last_updated"
)

_CATEGORY_COLS = "id, name, slug, icon, description, is_popular"

_COMPARISON_COLS = "id, user_id, product_id, selected_listings, created_at"

# Offer fields a partial update may touch
_UPDATABLE_OFFER_FIELDS: frozenset[str] = frozenset({
    "platform_tag", "platform_product_id", "url", "price",
    "original_price", "shipping_days", "shipping_cost", "in_stock",
    "rating", "review_count", "features",
})


def _new_id() -> str:
    return str(uuid.uuid4())


def _minor_or_none(amount: Decimal | None) -> int | None:
    return to_minor_units(amount) if amount is not None else None


def _row_to_product(row: tuple[Any, ...]) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        description=row[2],
        category=row[3],
        image=row[4],
        brand=row[5],
        created_at=from_timestamp(row[6]),
    )


def _row_to_offer(row: tuple[Any, ...]) -> Offer:
    return Offer(
        id=row[0],
        product_id=row[1],
        platform_tag=row[2],
        platform_product_id=row[3],
        url=row[4],
        price=from_minor_units(row[5]),
        original_price=(
            from_minor_units(row[6]) if row[6] is not None else None
        ),
        shipping_days=row[7],
        shipping_cost=(
            from_minor_units(row[8]) if row[8] is not None else None
        ),
        in_stock=bool(row[9]),
        rating=Decimal(row[10]) if row[10] is not None else None,
        review_count=row[11],
        features=list(json.loads(row[12])),
        last_updated=from_timestamp(row[13]),
    )


def _row_to_category(row: tuple[Any, ...]) -> Category:
    return Category(
        id=row[0],
        name=row[1],
        slug=row[2],
        icon=row[3],
        description=row[4],
        is_popular=bool(row[5]),
    )


def _row_to_comparison(row: tuple[Any, ...]) -> Comparison:
    return Comparison(
        id=row[0],
        user_id=row[1],
        product_id=row[2],
        offer_ids=list(json.loads(row[3])),
        created_at=from_timestamp(row[4]),
    )


def _offer_params(offer: Offer) -> tuple[object, ...]:
    return (
        offer.id,
        offer.product_id,
        offer.platform_tag,
        offer.platform_product_id,
        offer.url,
        to_minor_units(offer.price),
        _minor_or_none(offer.original_price),
        offer.shipping_days,
        _minor_or_none(offer.shipping_cost),
        int(offer.in_stock),
        str(offer.rating) if offer.rating is not None else None,
        offer.review_count,
        json.dumps(offer.features),
        to_timestamp(offer.last_updated),
    )


class CatalogDB(SQLiteStore):
    """SQLite implementation of the catalog store."""

    SCHEMA = _SCHEMA

    # ── Products ─────────────────────────────────────────

    def get_products(
        self, limit: int = Settings.PRODUCT_LIST_LIMIT,
    ) -> list[Product]:
        """Return up to *limit* products, newest first."""
        return self._query(
            f"SELECT {_PRODUCT_COLS} FROM products "
            "ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (limit,),
            _row_to_product,
        )

    def get_product(self, product_id: str) -> Product:
        rows = self._query(
            f"SELECT {_PRODUCT_COLS} FROM products WHERE id = ?",
            (product_id,),
            _row_to_product,
        )
        if not rows:
            raise NotFound("Product", product_id)
        return rows[0]

    def get_product_by_name(self, name: str) -> Product:
        rows = self._query(
            f"SELECT {_PRODUCT_COLS} FROM products WHERE name = ? "
            "ORDER BY rowid LIMIT 1",
            (name,),
            _row_to_product,
        )
        if not rows:
            raise NotFound("Product", name)
        return rows[0]

    def create_product(self, product: Product) -> Product:
        saved = dataclasses.replace(product, id=product.id or _new_id())
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO products ({_PRODUCT_COLS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    saved.id,
                    saved.name,
                    saved.description,
                    saved.category,
                    saved.image,
                    saved.brand,
                    to_timestamp(saved.created_at),
                ),
            )
        logger.info("Created product %s (%s)", saved.id, saved.name)
        return saved

    def search_products(
        self, query: str, limit: int = Settings.SEARCH_LIMIT,
    ) -> list[Product]:
        """Literal substring match on name, description, brand.

        Both sides are compared after Unicode case folding, so
        ``"éclair"`` finds ``"Éclair"`` and ``"strasse"`` finds
        ``"Straße"``.
        """
        needle = query.casefold()
        return self._query(
            f"SELECT {_PRODUCT_COLS} FROM products "
            "WHERE instr(casefold(name), ?) > 0 "
            "   OR instr(casefold(description), ?) > 0 "
            "   OR instr(casefold(brand), ?) > 0 "
            "ORDER BY rowid LIMIT ?",
            (needle, needle, needle, limit),
            _row_to_product,
        )

    # ── Offers ───────────────────────────────────────────

    def get_offer(self, offer_id: str) -> Offer:
        rows = self._query(
            f"SELECT {_OFFER_COLS} FROM product_listings WHERE id = ?",
            (offer_id,),
            _row_to_offer,
        )
        if not rows:
            raise NotFound("Offer", offer_id)
        return rows[0]

    def get_offers_for_product(self, product_id: str) -> list[Offer]:
        """All offers for a product, cheapest first (stable on ties)."""
        return self._query(
            f"SELECT {_OFFER_COLS} FROM product_listings "
            "WHERE product_id = ? ORDER BY price_minor ASC, rowid ASC",
            (product_id,),
            _row_to_offer,
        )

    def create_offer(self, offer: Offer) -> Offer:
        saved = dataclasses.replace(
            offer,
            id=offer.id or _new_id(),
            last_updated=datetime.now(),
        )
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO product_listings ({_OFFER_COLS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _offer_params(saved),
            )
        logger.info(
            "Created %s offer %s for product %s at %s",
            saved.platform_tag,
            saved.id,
            saved.product_id,
            saved.price,
        )
        return saved

    def update_offer(
        self, offer_id: str, changes: dict[str, Any],
    ) -> Offer:
        """Apply a partial update and bump ``last_updated``."""
        unknown = set(changes) - _UPDATABLE_OFFER_FIELDS
        if unknown:
            raise InvalidArgument(
                f"cannot update offer fields: {', '.join(sorted(unknown))}"
            )
        current = self.get_offer(offer_id)
        updated = dataclasses.replace(
            current, **changes, last_updated=datetime.now(),
        )
        params = _offer_params(updated)
        with self._cursor() as cur:
            cur.execute(
                "UPDATE product_listings SET "
                "product_id = ?, platform = ?, platform_product_id = ?, "
                "url = ?, price_minor = ?, original_price_minor = ?, "
                "shipping_days = ?, shipping_cost_minor = ?, in_stock = ?, "
                "rating = ?, review_count = ?, features = ?, "
                "last_updated = ? "
                "WHERE id = ?",
                params[1:] + (offer_id,),
            )
        logger.info(
            "Updated offer %s (%s)", offer_id, ", ".join(sorted(changes)),
        )
        return updated

    # ── Categories ───────────────────────────────────────

    def get_categories(self) -> list[Category]:
        return self._query(
            f"SELECT {_CATEGORY_COLS} FROM categories ORDER BY name",
            (),
            _row_to_category,
        )

    def get_popular_categories(self) -> list[Category]:
        return self._query(
            f"SELECT {_CATEGORY_COLS} FROM categories "
            "WHERE is_popular = 1 ORDER BY name",
            (),
            _row_to_category,
        )

    def create_category(self, category: Category) -> Category:
        saved = dataclasses.replace(category, id=category.id or _new_id())
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO categories ({_CATEGORY_COLS}) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    saved.id,
                    saved.name,
                    saved.slug,
                    saved.icon,
                    saved.description,
                    int(saved.is_popular),
                ),
            )
        return saved

    # ── Comparisons ──────────────────────────────────────

    def create_comparison(self, comparison: Comparison) -> Comparison:
        saved = dataclasses.replace(
            comparison, id=comparison.id or _new_id(),
        )
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO comparisons ({_COMPARISON_COLS}) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    saved.id,
                    saved.user_id,
                    saved.product_id,
                    json.dumps(saved.offer_ids),
                    to_timestamp(saved.created_at),
                ),
            )
        logger.debug(
            "Recorded comparison %s for product %s (%d offers)",
            saved.id,
            saved.product_id,
            len(saved.offer_ids),
        )
        return saved

    def get_comparison(self, comparison_id: str) -> Comparison:
        rows = self._query(
            f"SELECT {_COMPARISON_COLS} FROM comparisons WHERE id = ?",
            (comparison_id,),
            _row_to_comparison,
        )
        if not rows:
            raise NotFound("Comparison", comparison_id)
        return rows[0]

    def get_user_comparisons(self, user_id: str) -> list[Comparison]:
        """Saved comparisons for a user, newest first."""
        return self._query(
            f"SELECT {_COMPARISON_COLS} FROM comparisons "
            "WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
            _row_to_comparison,
        )
