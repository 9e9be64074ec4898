# src/storage/chart_exporter.py

"""Generate interactive Plotly HTML charts for a comparison."""

import importlib
import logging
import re
import webbrowser
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from src.config.settings import Settings
from src.models.comparison import ComparisonResult
from src.models.offer import platform_label

logger = logging.getLogger("price_compare.chart")

_BEST_COLOUR = "#16a34a"
_OFFER_COLOUR = "#64748b"
_LIST_PRICE_COLOUR = "#cbd5e1"


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _ensure_charts_dir() -> Path:
    """Create charts directory if it doesn't exist."""
    Settings.CHARTS_DIR.mkdir(parents=True, exist_ok=True)
    return Settings.CHARTS_DIR


def _build_comparison_chart(result: ComparisonResult) -> Any:
    """Grouped bars: list price vs current price for each offer."""
    go = _get_plotly_go()
    labels = [
        f"{platform_label(e.offer.platform_tag)} ({i + 1})"
        if _has_duplicate_platform(result, e.offer.platform_tag)
        else platform_label(e.offer.platform_tag)
        for i, e in enumerate(result.offers)
    ]
    # Plotly needs plain numbers; these are display-only
    prices = [float(e.price) for e in result.offers]
    originals = [
        float(e.offer.original_price)
        if e.offer.original_price is not None
        else None
        for e in result.offers
    ]
    colours = [
        _BEST_COLOUR if e is result.best_deal else _OFFER_COLOUR
        for e in result.offers
    ]

    fig: Any = go.Figure()
    fig.add_trace(go.Bar(
        x=labels,
        y=originals,
        name="List price",
        marker_color=_LIST_PRICE_COLOUR,
        hovertemplate=(
            f"%{{x}}<br>List: {Settings.CURRENCY_SYMBOL}%{{y:,.2f}}"
            "<extra></extra>"
        ),
    ))
    fig.add_trace(go.Bar(
        x=labels,
        y=prices,
        name="Price",
        marker_color=colours,
        hovertemplate=(
            f"%{{x}}<br>Price: {Settings.CURRENCY_SYMBOL}%{{y:,.2f}}"
            "<extra></extra>"
        ),
    ))

    index = next(
        (i for i, e in enumerate(result.offers) if e is result.best_deal),
        None,
    )
    if index is not None:
        fig.add_annotation(
            x=labels[index],
            y=prices[index],
            text="Best Deal",
            showarrow=True,
            arrowhead=2,
        )

    fig.update_layout(
        title=f"Price Comparison: {result.product.name[:60]}",
        xaxis_title="Platform",
        yaxis_title=f"Price ({Settings.CURRENCY})",
        barmode="group",
        template="plotly_white",
        legend={"orientation": "h", "y": -0.15},
    )
    return fig


def _has_duplicate_platform(result: ComparisonResult, tag: str) -> bool:
    return sum(1 for e in result.offers if e.offer.platform_tag == tag) > 1


def export_comparison_chart(
    result: ComparisonResult,
    open_browser: bool = True,
) -> Path | None:
    """Write the comparison chart as HTML; None when there are no offers."""
    if not result.offers:
        logger.warning(
            "No offers to chart for %s", result.product.name[:60],
        )
        return None

    fig = _build_comparison_chart(result)

    charts_dir = _ensure_charts_dir()
    slug = re.sub(r"[^A-Za-z0-9]+", "_", result.product.name[:30]).strip("_")
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = charts_dir / f"{slug}_{stamp}.html"
    fig.write_html(str(filepath))
    logger.info("Chart saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
