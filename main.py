# main.py

"""Entry point for the price_compare application (TUI, CLI or JSON API)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_compare.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    platforms = ", ".join(p["label"] for p in Settings.AVAILABLE_PLATFORMS)

    parser = argparse.ArgumentParser(
        prog="price_compare",
        description="Compare product prices across e-commerce platforms.",
        epilog=f"Platforms: {platforms}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-c",
        "--compare",
        default=None,
        metavar="PRODUCT",
        help="Compare listings for a product id or exact name.",
    )
    parser.add_argument(
        "-l",
        "--listings",
        default=None,
        help="Comma-separated listing ids (default: all for the product).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        default=False,
        help="Save the comparison as JSON and CSV under results/.",
    )
    parser.add_argument(
        "--chart",
        action="store_true",
        default=False,
        help="Write a Plotly price chart for the comparison.",
    )
    parser.add_argument(
        "--in-stock",
        action="store_true",
        default=False,
        help="With --compare, show only listings that are in stock.",
    )
    parser.add_argument(
        "--platforms",
        default=None,
        help="With --compare, comma-separated platform ids to show.",
    )
    parser.add_argument(
        "--categories",
        action="store_true",
        default=False,
        help="List categories.",
    )
    parser.add_argument(
        "--popular",
        action="store_true",
        default=False,
        help="With --categories, list only popular ones.",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        default=False,
        help="Load the sample catalog into an empty database.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the JSON API server.",
    )
    parser.add_argument(
        "--host",
        default=None,
        help=f"API bind address (default: {Settings.API_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"API port (default: {Settings.API_PORT}).",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import PriceCompareApp

    try:
        app = PriceCompareApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("price_compare TUI shutting down")


def _split_csv(value: str | None) -> list[str]:
    return [s.strip() for s in (value or "").split(",") if s.strip()]


def _run_compare(args: argparse.Namespace) -> None:
    from src.cli.runner import cli_compare

    exit_code = asyncio.run(
        cli_compare(
            product_ref=args.compare,
            listing_csv=args.listings,
            output_format=args.output_format,
            save=args.save,
            chart=args.chart,
            in_stock=args.in_stock,
            platforms=_split_csv(args.platforms),
        )
    )
    sys.exit(exit_code)


def _run_search(args: argparse.Namespace) -> None:
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(query=args.query, output_format=args.output_format)
    )
    sys.exit(exit_code)


def _run_categories(args: argparse.Namespace) -> None:
    from src.cli.runner import cli_categories

    sys.exit(cli_categories(args.popular, args.output_format))


def _run_seed() -> None:
    from src.cli.runner import run_seed

    sys.exit(run_seed())


def _run_server(args: argparse.Namespace) -> None:
    from src.api.server import serve

    sys.exit(serve(args.host, args.port))


def main() -> None:
    """Route to the TUI (no args), the API server or a headless command."""
    log_file = setup_logging()
    logger.info("price_compare starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.seed:
        _run_seed()
    elif args.serve:
        _run_server(args)
    elif args.categories:
        _run_categories(args)
    elif args.compare is not None:
        _run_compare(args)
    elif args.query is None:
        _run_tui()
    else:
        _run_search(args)


if __name__ == "__main__":
    main()
