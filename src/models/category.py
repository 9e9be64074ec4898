# src/models/category.py

"""Browsable category model."""

from dataclasses import dataclass


@dataclass
class Category:
    """A named category with a unique slug and a UI icon tag.

    Independent of ``Product.category``: a product may name a category
    that has no row here, and vice versa.
    """

    id: str
    name: str
    slug: str
    icon: str
    description: str | None = None
    is_popular: bool = False
