# src/config/settings.py

"""Central configuration for the price_compare application."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the price_compare application."""

    # --- Catalog queries ---
    MIN_QUERY_LENGTH: int = 2           # Trimmed chars required to search
    SEARCH_LIMIT: int = 20              # Max products per search
    PRODUCT_LIST_LIMIT: int = 50        # Default page for product listing
    REVIEW_PAGE_SIZE: int = 10          # Reviews attached per offer

    # --- Aggregation ---
    STORE_CALL_TIMEOUT: float = 5.0     # Seconds per store lookup

    # --- HTTP API ---
    API_HOST: str = os.getenv("PRICE_COMPARE_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("PRICE_COMPARE_PORT", "5000"))

    # --- Money ---
    CURRENCY: str = "INR"
    CURRENCY_SYMBOL: str = "₹"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    DB_PATH: Path = Path(
        os.getenv("PRICE_COMPARE_DB", str(DATA_DIR / "price_compare.db"))
    )
    RESULTS_DIR: Path = BASE_DIR / "results"
    CHARTS_DIR: Path = DATA_DIR / "charts"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Platforms (registry for future extensibility) ---
    AVAILABLE_PLATFORMS: list[dict[str, str]] = [
        {"id": "amazon", "label": "Amazon", "badge": "Amazon's Choice"},
        {"id": "flipkart", "label": "Flipkart", "badge": "Flipkart Assured"},
        {"id": "myntra", "label": "Myntra", "badge": "Myntra Insider"},
        {"id": "meesho", "label": "Meesho", "badge": "Meesho Guarantee"},
    ]
