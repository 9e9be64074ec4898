# tests/test_chart_exporter.py

"""Tests for the Plotly chart exporter."""

import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from src.config.settings import Settings
from src.models.comparison import ComparisonResult, OfferWithReviews
from src.services.offer_aggregator import select_best_deal
from src.storage.chart_exporter import (
    _build_comparison_chart,
    export_comparison_chart,
)
from tests.fakes import make_offer, make_product


def _result(*offers: tuple[str, str, str]) -> ComparisonResult:
    entries = [
        OfferWithReviews(offer=make_offer(
            oid, price, platform=platform,
            original_price=Decimal(price) + 1000,
        ))
        for oid, price, platform in offers
    ]
    return ComparisonResult(
        product=make_product("p1", "Sony WH-1000XM5 Headphones"),
        offers=entries,
        best_deal=select_best_deal(entries),
    )


class TestBuildComparisonChart(unittest.TestCase):
    """Figure contents."""

    def test_two_traces_one_bar_per_offer(self) -> None:
        fig = _build_comparison_chart(_result(
            ("a", "29990.00", "amazon"),
            ("f", "26990.00", "flipkart"),
        ))
        self.assertEqual(len(fig.data), 2)
        self.assertEqual(list(fig.data[1].x), ["Amazon", "Flipkart"])
        self.assertEqual(list(fig.data[1].y), [29990.0, 26990.0])
        self.assertEqual(list(fig.data[0].y), [30990.0, 27990.0])

    def test_best_deal_annotated(self) -> None:
        fig = _build_comparison_chart(_result(
            ("a", "29990.00", "amazon"),
            ("f", "26990.00", "flipkart"),
        ))
        annotations = fig.layout.annotations
        self.assertEqual(len(annotations), 1)
        self.assertEqual(annotations[0].text, "Best Deal")
        self.assertEqual(annotations[0].x, "Flipkart")

    def test_same_platform_twice_gets_numbered_labels(self) -> None:
        fig = _build_comparison_chart(_result(
            ("a1", "100.00", "amazon"),
            ("a2", "90.00", "amazon"),
        ))
        self.assertEqual(list(fig.data[1].x), ["Amazon (1)", "Amazon (2)"])

    def test_duplicate_listing_coloured_once(self) -> None:
        fig = _build_comparison_chart(_result(
            ("a", "100.00", "amazon"),
            ("a", "100.00", "amazon"),
        ))
        colours = list(fig.data[1].marker.color)
        self.assertEqual(colours.count(colours[0]), 1)
        self.assertEqual(len(fig.layout.annotations), 1)


class TestExportComparisonChart(unittest.TestCase):
    """HTML export."""

    @patch("src.storage.chart_exporter.webbrowser")
    def test_generates_html_file(self, mock_wb: MagicMock) -> None:
        """Export should create an HTML file in CHARTS_DIR and open it."""
        path = export_comparison_chart(_result(
            ("a", "29990.00", "amazon"),
        ))
        assert path is not None
        self.assertTrue(path.exists())
        self.assertEqual(path.suffix, ".html")
        self.assertEqual(path.parent, Settings.CHARTS_DIR)
        self.assertTrue(path.name.startswith("Sony_WH_1000XM5_Headphones"))
        mock_wb.open.assert_called_once_with(path.as_uri())

    @patch("src.storage.chart_exporter.webbrowser")
    def test_no_browser_when_disabled(self, mock_wb: MagicMock) -> None:
        path = export_comparison_chart(
            _result(("a", "10.00", "amazon")), open_browser=False,
        )
        self.assertIsNotNone(path)
        mock_wb.open.assert_not_called()

    @patch("src.storage.chart_exporter.webbrowser")
    def test_empty_result_returns_none(self, mock_wb: MagicMock) -> None:
        """Nothing to chart: no file and no browser."""
        self.assertIsNone(export_comparison_chart(_result()))
        self.assertFalse(Settings.CHARTS_DIR.exists())
        mock_wb.open.assert_not_called()


if __name__ == "__main__":
    unittest.main()
