# src/ui/app.py

"""Terminal UI: search the catalog and compare a product across platforms."""

import asyncio
import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.filters.offer_filter import OfferFilter
from src.models.comparison import ComparisonResult, OfferWithReviews
from src.models.money import display_money
from src.models.offer import platform_label
from src.models.product import Product
from src.services.errors import InvalidArgument, PriceCompareError
from src.services.interfaces import CatalogStore, ReviewStore
from src.services.offer_aggregator import OfferAggregator
from src.storage.file_manager import FileManager

logger = logging.getLogger("price_compare.ui")


class PriceCompareApp(App[object]):
    """Terminal UI for the price_compare application."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "save", "Save"),
        Binding("e", "export", "Export CSV"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("r", "sort_rating", "Rating Sort"),
        Binding("c", "copy_url", "Copy URL"),
    ]

    def __init__(
        self,
        catalog: CatalogStore | None = None,
        reviews: ReviewStore | None = None,
    ) -> None:
        super().__init__()
        self._owns_stores = catalog is None or reviews is None
        if catalog is None or reviews is None:
            from src.storage.catalog_db import CatalogDB
            from src.storage.review_db import ReviewDB

            catalog = catalog or CatalogDB()
            reviews = reviews or ReviewDB()
        self.catalog = catalog
        self.reviews = reviews
        self.aggregator = OfferAggregator(catalog, reviews)
        self.file_manager = FileManager()
        self.settings = Settings()
        self.products: list[Product] = []
        self.comparison: ComparisonResult | None = None
        self.offers: list[OfferWithReviews] = []

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        platform_names = ", ".join(
            p["label"] for p in self.settings.AVAILABLE_PLATFORMS
        )

        yield Header()
        yield Container(
            Static(f"🛒 Price Compare ({platform_names})", id="title"),
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            DataTable(
                id="products_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            Static("", id="best_deal"),
            DataTable(
                id="offers_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            id="main_container",
        )
        yield Footer()

    def _table(self, table_id: str) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one(f"#{table_id}", DataTable),
        )

    def on_mount(self) -> None:
        """Configure table columns on startup."""
        self._table("products_table").add_columns(
            "Name", "Brand", "Category",
        )
        self._table("offers_table").add_columns(
            "Platform", "Price", "List", "Off", "Shipping",
            "Rating", "Reviews", "Stock",
        )

    def on_unmount(self) -> None:
        if self._owns_stores:
            for store in (self.catalog, self.reviews):
                close = getattr(store, "close", None)
                if close is not None:
                    close()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search_input":
            await self.perform_search()

    async def perform_search(self) -> None:
        """Search the catalog and list matching products."""
        query = self.query_one("#search_input", Input).value
        status = self.query_one("#status", Static)
        try:
            self.products = await self.aggregator.search(query)
        except InvalidArgument as exc:
            self.notify(str(exc), severity="warning")
            return
        except PriceCompareError as exc:
            logger.error("Search failed: %s", exc, exc_info=True)
            self.notify(f"Search failed: {exc}", severity="error")
            return

        table = self._table("products_table")
        table.clear()
        for p in self.products:
            table.add_row(p.name[:50], p.brand or "", p.category)

        if self.products:
            status.update(
                f"🔍 {len(self.products)} products for '{query.strip()}'"
                " (select one to compare)"
            )
        else:
            status.update("❌ No products found")

    async def load_comparison(self, product: Product) -> None:
        """Compare every listing of *product* and show the result."""
        status = self.query_one("#status", Static)
        status.update(f"⚖️  Comparing '{product.name}'...")
        try:
            listings = await asyncio.to_thread(
                self.catalog.get_offers_for_product, product.id
            )
            self.comparison = await self.aggregator.compare(
                product.id, [o.id for o in listings]
            )
        except PriceCompareError as exc:
            logger.error(
                "Comparison failed for %s: %s", product.id, exc,
                exc_info=True,
            )
            self.notify(f"Comparison failed: {exc}", severity="error")
            return

        self.offers = list(self.comparison.offers)
        self.populate_offers()
        status.update(
            f"✅ {len(self.offers)} listings for '{product.name}'"
        )

    def populate_offers(self) -> None:
        """Fill the offers table, highlighting the best deal."""
        table = self._table("offers_table")
        banner = self.query_one("#best_deal", Static)
        table.clear()

        best = self.comparison.best_deal if self.comparison else None
        if best is None:
            banner.update("No listings available")
        else:
            banner.update(
                f"🏆 Best Deal: {platform_label(best.offer.platform_tag)}"
                f" - {display_money(best.price)}"
            )

        for entry in self.offers:
            offer = entry.offer
            is_best = entry is best
            shipping = (
                display_money(offer.shipping_cost)
                if offer.shipping_cost
                else "Free"
            )
            table.add_row(
                platform_label(offer.platform_tag),
                Text(
                    display_money(offer.price),
                    style="bold green" if is_best else "",
                ),
                (
                    display_money(offer.original_price)
                    if offer.discount_percent and offer.original_price
                    else ""
                ),
                f"{offer.discount_percent}%" if offer.discount_percent else "",
                f"{shipping} · {offer.shipping_text}",
                f"⭐ {offer.rating:.1f}" if offer.rating is not None else "",
                str(offer.review_count),
                "In stock" if offer.in_stock else "Out of stock",
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected,
    ) -> None:
        """Products table: compare the product. Offers table: open URL."""
        row = event.cursor_row
        if event.data_table.id == "products_table":
            if 0 <= row < len(self.products):
                self.run_worker(
                    self.load_comparison(self.products[row]),
                    exclusive=True,
                )
        elif event.data_table.id == "offers_table":
            if 0 <= row < len(self.offers):
                webbrowser.open(self.offers[row].offer.url)

    def action_sort_price(self) -> None:
        """Sort offers by price, cheapest first."""
        self.offers = OfferFilter.sort_by_price(self.offers)
        self.populate_offers()

    def action_sort_rating(self) -> None:
        """Sort offers by rating, best first."""
        self.offers = OfferFilter.sort_by_rating(self.offers)
        self.populate_offers()

    def action_save(self) -> None:
        """Save the current comparison to a JSON file."""
        if self.comparison is None:
            self.notify("No comparison to save", severity="warning")
            return
        try:
            path = self.file_manager.save_comparison(self.comparison)
            self.notify(f"Saved to {path}")
        except OSError as exc:
            logger.error("Failed to save comparison", exc_info=True)
            self.notify(f"Save failed: {exc}", severity="error")

    def action_export(self) -> None:
        """Export the current comparison to a CSV file."""
        if self.comparison is None:
            self.notify("No comparison to export", severity="warning")
            return
        try:
            path = self.file_manager.export_csv(self.comparison)
            self.notify(f"Exported to {path}")
        except OSError as exc:
            logger.error("Failed to export comparison", exc_info=True)
            self.notify(f"Export failed: {exc}", severity="error")

    def action_copy_url(self) -> None:
        """Copy the selected offer's URL to the clipboard."""
        row = self._table("offers_table").cursor_row
        if not 0 <= row < len(self.offers):
            self.notify("No listing selected", severity="warning")
            return
        try:
            import pyperclip  # type: ignore[import-untyped]

            pyperclip.copy(self.offers[row].offer.url)
            self.notify("URL Copied")
        except Exception:
            logger.error(
                "Failed to copy URL to clipboard",
                exc_info=True,
            )
            self.notify(
                "Could not copy URL to clipboard", severity="warning"
            )
