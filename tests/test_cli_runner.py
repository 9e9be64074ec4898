# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import random
import unittest
from contextlib import redirect_stdout
from decimal import Decimal
from typing import Any
from unittest.mock import patch

from src.cli.runner import (
    cli_categories,
    cli_compare,
    cli_search,
    run_seed,
)
from src.config.settings import Settings
from src.services.errors import StoreUnavailable
from src.storage.catalog_db import CatalogDB
from src.storage.review_db import ReviewDB
from src.storage.seed_data import seed_database


class _SeededCase(unittest.IsolatedAsyncioTestCase):
    """Seed the configured database, then run commands against it."""

    def setUp(self) -> None:
        catalog, reviews = CatalogDB(), ReviewDB()
        try:
            seed_database(catalog, reviews, rng=random.Random(7))
            iphone = catalog.get_product_by_name("iPhone 15 Pro")
            self.iphone_id = iphone.id
            self.iphone_offers = catalog.get_offers_for_product(iphone.id)
        finally:
            catalog.close()
            reviews.close()

    def _capture(self) -> io.StringIO:
        buffer = io.StringIO()
        ctx = redirect_stdout(buffer)
        ctx.__enter__()
        self.addCleanup(ctx.__exit__, None, None, None)
        return buffer


class TestCliSearch(_SeededCase):
    """cli_search output and exit codes."""

    async def test_json_results(self) -> None:
        out = self._capture()
        code = await cli_search("galaxy", "json")
        self.assertEqual(code, 0)
        data: list[dict[str, Any]] = json.loads(out.getvalue())
        self.assertEqual([p["name"] for p in data], ["Samsung Galaxy S24"])

    async def test_table_results(self) -> None:
        out = self._capture()
        code = await cli_search("running", "table")
        self.assertEqual(code, 0)
        self.assertIn("Nike", out.getvalue())
        self.assertIn("Adidas", out.getvalue())

    async def test_short_query_fails(self) -> None:
        self.assertEqual(await cli_search("x", "json"), 1)

    async def test_no_matches_fails(self) -> None:
        self.assertEqual(await cli_search("toaster", "json"), 1)

    async def test_store_failure_exits_one(self) -> None:
        with patch(
            "src.cli.runner.OfferAggregator.search",
            side_effect=StoreUnavailable("search timed out after 5.0s"),
        ):
            self.assertEqual(await cli_search("galaxy", "json"), 1)


class TestCliCompare(_SeededCase):
    """cli_compare resolution, output and side files."""

    async def test_compare_by_id_json(self) -> None:
        out = self._capture()
        code = await cli_compare(self.iphone_id, None, "json")
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(len(data["listings"]), 4)
        cheapest = min(o.price for o in self.iphone_offers)
        self.assertEqual(Decimal(data["bestDeal"]["price"]), cheapest)

    async def test_compare_by_name_table(self) -> None:
        out = self._capture()
        code = await cli_compare("iPhone 15 Pro", None, "table")
        self.assertEqual(code, 0)
        self.assertIn("iPhone", out.getvalue())
        self.assertIn("🏆", out.getvalue())

    async def test_explicit_listing_ids(self) -> None:
        out = self._capture()
        chosen = self.iphone_offers[-1].id
        code = await cli_compare(
            self.iphone_id, f"{chosen}, bogus", "json"
        )
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([o["id"] for o in data["listings"]], [chosen])
        self.assertEqual(data["bestDeal"]["id"], chosen)

    async def test_in_stock_filter_repicks_best_deal(self) -> None:
        catalog = CatalogDB()
        cheapest = self.iphone_offers[0]
        catalog.update_offer(cheapest.id, {"in_stock": False})
        catalog.close()
        out = self._capture()
        code = await cli_compare(self.iphone_id, None, "json", in_stock=True)
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(len(data["listings"]), 3)
        self.assertNotIn(cheapest.id, [o["id"] for o in data["listings"]])
        self.assertEqual(
            Decimal(data["bestDeal"]["price"]), self.iphone_offers[1].price
        )

    async def test_platform_filter(self) -> None:
        out = self._capture()
        code = await cli_compare(
            self.iphone_id, None, "json", platforms=["Meesho"]
        )
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([o["platform"] for o in data["listings"]],
                         ["meesho"])
        self.assertEqual(data["bestDeal"]["platform"], "meesho")

    async def test_filters_do_not_change_recorded_listings(self) -> None:
        self._capture()
        await cli_compare(self.iphone_id, None, "json", platforms=["amazon"])
        catalog = CatalogDB()
        self.addCleanup(catalog.close)
        (saved,) = catalog._query(
            "SELECT id FROM comparisons", (), lambda r: r[0]
        )
        self.assertEqual(len(catalog.get_comparison(saved).offer_ids), 4)

    async def test_only_bogus_ids_exit_one(self) -> None:
        self._capture()
        self.assertEqual(
            await cli_compare(self.iphone_id, "bogus", "json"), 1
        )

    async def test_unknown_product(self) -> None:
        self.assertEqual(await cli_compare("Nokia 3310", None, "json"), 1)

    async def test_save_and_chart(self) -> None:
        self._capture()
        code = await cli_compare(
            self.iphone_id, None, "json", save=True, chart=True,
        )
        self.assertEqual(code, 0)
        saved = sorted(p.suffix for p in Settings.RESULTS_DIR.iterdir())
        self.assertEqual(saved, [".csv", ".json"])
        self.assertEqual(len(list(Settings.CHARTS_DIR.glob("*.html"))), 1)

    async def test_compare_is_recorded(self) -> None:
        self._capture()
        await cli_compare(self.iphone_id, None, "json")
        catalog = CatalogDB()
        self.addCleanup(catalog.close)
        rows = catalog._query(
            "SELECT product_id FROM comparisons", (), lambda r: r[0]
        )
        self.assertEqual(rows, [self.iphone_id])


class TestCliCategoriesAndSeed(_SeededCase):
    """cli_categories and run_seed."""

    def test_popular_categories_json(self) -> None:
        out = self._capture()
        self.assertEqual(cli_categories(True, "json"), 0)
        data = json.loads(out.getvalue())
        self.assertEqual(len(data), 5)
        self.assertTrue(all(c["isPopular"] for c in data))

    def test_all_categories_table(self) -> None:
        out = self._capture()
        self.assertEqual(cli_categories(False, "table"), 0)
        self.assertIn("Books", out.getvalue())

    def test_seed_again_is_noop(self) -> None:
        self.assertEqual(run_seed(), 0)
        catalog = CatalogDB()
        self.addCleanup(catalog.close)
        self.assertEqual(len(catalog.get_products()), 6)


if __name__ == "__main__":
    unittest.main()
