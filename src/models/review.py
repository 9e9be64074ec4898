# src/models/review.py

"""Customer review attached to a single offer."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Review:
    """A review of one offer. ``sentiment`` is free text."""

    id: str
    offer_id: str
    text: str
    rating: int
    reviewer_name: str | None = None
    sentiment: str | None = None
    helpful: bool | None = False
    created_at: datetime = field(default_factory=datetime.now)
