# src/storage/file_manager.py

"""Saves comparison results to disk."""

import csv
import json
import logging
import re
from datetime import datetime
from pathlib import Path

from src.api.serializers import comparison_result_to_dict
from src.config.settings import Settings
from src.filters.offer_filter import OfferFilter
from src.models.comparison import ComparisonResult
from src.models.money import format_money
from src.models.offer import platform_label

logger = logging.getLogger("price_compare.storage")


def _slug(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", text).strip("_").lower() or "product"


class FileManager:
    """Writes comparison results as JSON and CSV under ``RESULTS_DIR``."""

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "FileManager initialised, results_dir=%s", self.results_dir
        )

    def _path_for(self, result: ComparisonResult, prefix: str, ext: str) -> Path:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = f"{prefix}_{_slug(result.product.name)}_{stamp}.{ext}"
        return self.results_dir / name

    def save_comparison(self, result: ComparisonResult) -> Path:
        """Save the comparison in its API wire format."""
        filepath = self._path_for(result, "comparison", "json")
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(
                comparison_result_to_dict(result),
                f,
                ensure_ascii=False,
                indent=2,
            )
        logger.info(
            "Saved comparison of %d offers for '%s' to %s",
            len(result.offers),
            result.product.name,
            filepath,
        )
        return filepath

    def export_csv(self, result: ComparisonResult) -> Path:
        """Export the offers cheapest-first, flagging the best deal."""
        filepath = self._path_for(result, "export", "csv")

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow([
                "Platform", "Price", "Original Price", "Discount %",
                "Shipping", "Rating", "Reviews", "In Stock",
                "Best Deal", "URL",
            ])
            for entry in OfferFilter.sort_by_price(result.offers):
                offer = entry.offer
                writer.writerow([
                    platform_label(offer.platform_tag),
                    format_money(offer.price),
                    (
                        format_money(offer.original_price)
                        if offer.original_price is not None
                        else ""
                    ),
                    offer.discount_percent or "",
                    (
                        format_money(offer.shipping_cost)
                        if offer.shipping_cost
                        else "Free"
                    ),
                    offer.rating if offer.rating is not None else "",
                    offer.review_count,
                    "yes" if offer.in_stock else "no",
                    "yes" if entry is result.best_deal else "",
                    offer.url,
                ])

        logger.info(
            "Exported %d offers for '%s' to %s",
            len(result.offers),
            result.product.name,
            filepath,
        )
        return filepath
