# src/cli/runner.py

"""Headless CLI commands built on the stores and the offer aggregator."""

import asyncio
import dataclasses
import json
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.api.serializers import (
    category_to_dict,
    comparison_result_to_dict,
    product_to_dict,
)
from src.filters.offer_filter import OfferFilter
from src.models.comparison import ComparisonResult
from src.models.money import display_money
from src.models.offer import platform_label
from src.models.product import Product
from src.services.errors import (
    InvalidArgument,
    NotFound,
    PriceCompareError,
)
from src.services.offer_aggregator import OfferAggregator, select_best_deal
from src.storage.catalog_db import CatalogDB
from src.storage.chart_exporter import export_comparison_chart
from src.storage.file_manager import FileManager
from src.storage.review_db import ReviewDB
from src.storage.seed_data import seed_database

logger = logging.getLogger("price_compare.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _open_stores() -> tuple[CatalogDB, ReviewDB]:
    return CatalogDB(), ReviewDB()


def _dump_json(body: object) -> None:
    json.dump(body, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_products(products: list[Product]) -> None:
    table = Table(
        title="Products", show_lines=True, title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=40)
    table.add_column("Brand", style="magenta")
    table.add_column("Category")
    table.add_column("ID", overflow="fold", style="dim")
    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx), p.name, p.brand or "—", p.category, p.id,
        )
    Console().print(table)


def print_comparison(result: ComparisonResult) -> None:
    """Render the offers cheapest-first with the best deal highlighted."""
    table = Table(
        title=f"{result.product.name}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Platform", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("List", justify="right", style="dim strike")
    table.add_column("Off", justify="right", style="yellow")
    table.add_column("Shipping")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("URL", overflow="fold", style="dim")

    for entry in OfferFilter.sort_by_price(result.offers):
        offer = entry.offer
        is_best = entry is result.best_deal
        label = platform_label(offer.platform_tag)
        shipping = offer.shipping_text
        if offer.shipping_cost:
            shipping += f" · {display_money(offer.shipping_cost)}"
        else:
            shipping += " · Free"
        table.add_row(
            Text(f"🏆 {label}" if is_best else label),
            Text(
                display_money(offer.price),
                style="bold green" if is_best else "",
            ),
            (
                display_money(offer.original_price)
                if offer.discount_percent
                and offer.original_price is not None
                else ""
            ),
            f"{offer.discount_percent}%" if offer.discount_percent else "",
            shipping,
            f"⭐ {offer.rating:.1f}" if offer.rating is not None else "—",
            str(offer.review_count),
            offer.url,
        )

    Console().print(table)
    if result.best_deal is not None:
        best = result.best_deal.offer
        _err.print(
            f"[green]Best deal: {platform_label(best.platform_tag)} "
            f"at {display_money(best.price)}[/green]"
        )
    else:
        _err.print("[yellow]No listings available.[/yellow]")


async def cli_search(query: str, output_format: str) -> int:
    """Search the catalog; 0 on matches, 1 on error or no matches."""
    catalog, reviews = _open_stores()
    try:
        aggregator = OfferAggregator(catalog, reviews)
        try:
            products = await aggregator.search(query)
        except InvalidArgument as exc:
            _err.print(f"[red]{exc}[/red]")
            return 1
        except PriceCompareError as exc:
            logger.error("Search failed: %s", exc, exc_info=True)
            _err.print(f"[red]Search failed: {exc}[/red]")
            return 1
        if not products:
            _err.print("[yellow]No products found.[/yellow]")
            return 1
        if output_format == "table":
            _print_products(products)
        else:
            _dump_json([product_to_dict(p) for p in products])
        return 0
    finally:
        catalog.close()
        reviews.close()


def narrow_result(
    result: ComparisonResult,
    in_stock: bool = False,
    platforms: list[str] | None = None,
) -> ComparisonResult:
    """Apply display filters and pick the best deal among what is left."""
    entries = result.offers
    if in_stock:
        entries, hidden = OfferFilter.in_stock_only(entries)
        if hidden:
            _err.print(f"[dim]{hidden} out-of-stock listing(s) hidden[/dim]")
    entries = OfferFilter.by_platforms(entries, platforms or [])
    if len(entries) == len(result.offers):
        return result
    return dataclasses.replace(
        result, offers=entries, best_deal=select_best_deal(entries),
    )


async def _resolve_product(catalog: CatalogDB, ref: str) -> Product:
    """Look a product up by id, falling back to its exact name."""
    try:
        return await asyncio.to_thread(catalog.get_product, ref)
    except NotFound:
        return await asyncio.to_thread(catalog.get_product_by_name, ref)


async def cli_compare(
    product_ref: str,
    listing_csv: str | None,
    output_format: str,
    save: bool = False,
    chart: bool = False,
    in_stock: bool = False,
    platforms: list[str] | None = None,
) -> int:
    """Compare a product's listings and report the best deal.

    The comparison is recorded over every requested listing; the
    ``in_stock`` and ``platforms`` filters only narrow what is shown.
    """
    catalog, reviews = _open_stores()
    try:
        try:
            product = await _resolve_product(catalog, product_ref)
        except NotFound:
            _err.print(f"[red]Product not found: {product_ref}[/red]")
            return 1

        if listing_csv:
            offer_ids = [
                s.strip() for s in listing_csv.split(",") if s.strip()
            ]
        else:
            offers = await asyncio.to_thread(
                catalog.get_offers_for_product, product.id
            )
            offer_ids = [o.id for o in offers]

        aggregator = OfferAggregator(catalog, reviews)
        try:
            result = await aggregator.compare(product.id, offer_ids)
        except PriceCompareError as exc:
            logger.error("Comparison failed: %s", exc, exc_info=True)
            _err.print(f"[red]Comparison failed: {exc}[/red]")
            return 1

        if result.dropped_count:
            _err.print(
                f"[dim]{result.dropped_count} listing id(s) "
                "could not be resolved[/dim]"
            )
        result = narrow_result(result, in_stock, platforms)

        if output_format == "table":
            print_comparison(result)
        else:
            _dump_json(comparison_result_to_dict(result))

        if save:
            file_manager = FileManager()
            json_path = file_manager.save_comparison(result)
            csv_path = file_manager.export_csv(result)
            _err.print(f"[dim]Saved → {json_path}, {csv_path}[/dim]")
        if chart:
            path = export_comparison_chart(result, open_browser=False)
            if path is not None:
                _err.print(f"[dim]Chart → {path}[/dim]")

        return 0 if result.offers else 1
    finally:
        catalog.close()
        reviews.close()


def cli_categories(popular: bool, output_format: str) -> int:
    """List all (or only popular) categories."""
    catalog, reviews = _open_stores()
    try:
        categories = (
            catalog.get_popular_categories()
            if popular
            else catalog.get_categories()
        )
    except PriceCompareError as exc:
        logger.error("Category listing failed: %s", exc, exc_info=True)
        _err.print("[red]Failed to fetch categories[/red]")
        return 1
    finally:
        catalog.close()
        reviews.close()

    if output_format == "table":
        table = Table(title="Categories", title_style="bold cyan")
        table.add_column("Name")
        table.add_column("Slug", style="dim")
        table.add_column("Icon")
        table.add_column("Popular", justify="center")
        for c in categories:
            table.add_row(c.name, c.slug, c.icon, "★" if c.is_popular else "")
        Console().print(table)
    else:
        _dump_json([category_to_dict(c) for c in categories])
    return 0


def run_seed() -> int:
    """Seed the configured database with the sample catalog."""
    catalog, reviews = _open_stores()
    try:
        inserted = seed_database(catalog, reviews)
    except PriceCompareError as exc:
        logger.error("Seeding failed: %s", exc, exc_info=True)
        _err.print(f"[red]Seeding failed: {exc}[/red]")
        return 1
    finally:
        catalog.close()
        reviews.close()

    if inserted:
        _err.print(f"[green]✓ Seeded {inserted} products[/green]")
    else:
        _err.print("[dim]Catalog already has products, nothing to do[/dim]")
    return 0
