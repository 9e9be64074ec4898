# src/models/product.py

"""Catalog product model."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Product:
    """A catalog item that can be listed on several platforms.

    ``category`` is free text and is not tied to a
    :class:`~src.models.category.Category` row.
    """

    id: str
    name: str
    category: str
    description: str | None = None
    brand: str | None = None
    image: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
