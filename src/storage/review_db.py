# src/storage/review_db.py

"""SQLite-backed review store, keyed by offer id."""

import dataclasses
import logging
import uuid
from typing import Any

from src.config.settings import Settings
from src.models.review import Review
from src.storage.sqlite_base import SQLiteStore, from_timestamp, to_timestamp

logger = logging.getLogger("price_compare.reviews")

# No foreign key to product_listings: offers belong to the catalog store,
# which may live in a different database.
_SCHEMA = """\
CREATE TABLE IF NOT EXISTS reviews (
    id                 TEXT    PRIMARY KEY,
    product_listing_id TEXT    NOT NULL,
    review_text        TEXT    NOT NULL,
    rating             INTEGER NOT NULL,
    reviewer_name      TEXT,
    sentiment          TEXT,
    helpful            INTEGER DEFAULT 0,
    created_at         TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_reviews_listing_date
    ON reviews(product_listing_id, created_at);
"""

_REVIEW_COLS = (
    "id, product_listing_id, review_text, rating, reviewer_name, "
    "sentiment, helpful, created_at"
)


def _row_to_review(row: tuple[Any, ...]) -> Review:
    return Review(
        id=row[0],
        offer_id=row[1],
        text=row[2],
        rating=row[3],
        reviewer_name=row[4],
        sentiment=row[5],
        helpful=bool(row[6]) if row[6] is not None else None,
        created_at=from_timestamp(row[7]),
    )


class ReviewDB(SQLiteStore):
    """SQLite implementation of the review store."""

    SCHEMA = _SCHEMA

    def get_reviews_for_offer(
        self, offer_id: str, limit: int = Settings.REVIEW_PAGE_SIZE,
    ) -> list[Review]:
        """Most recent reviews first; empty when the offer has none."""
        return self._query(
            f"SELECT {_REVIEW_COLS} FROM reviews "
            "WHERE product_listing_id = ? "
            "ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (offer_id, limit),
            _row_to_review,
        )

    def create_review(self, review: Review) -> Review:
        saved = dataclasses.replace(
            review, id=review.id or str(uuid.uuid4()),
        )
        with self._cursor() as cur:
            cur.execute(
                f"INSERT INTO reviews ({_REVIEW_COLS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    saved.id,
                    saved.offer_id,
                    saved.text,
                    saved.rating,
                    saved.reviewer_name,
                    saved.sentiment,
                    (
                        int(saved.helpful)
                        if saved.helpful is not None
                        else None
                    ),
                    to_timestamp(saved.created_at),
                ),
            )
        logger.debug(
            "Created review %s for offer %s", saved.id, saved.offer_id,
        )
        return saved
