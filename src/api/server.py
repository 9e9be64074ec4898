# src/api/server.py

"""Flask application exposing :class:`ApiHandlers` over HTTP.

Views are synchronous; each one drives its handler coroutine with
``asyncio.run`` and turns the :class:`ApiResponse` into a JSON reply.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from flask import Flask, Response, jsonify, request

from src.api.handlers import ApiHandlers, ApiResponse
from src.config.settings import Settings
from src.services.interfaces import CatalogStore, ReviewStore
from src.storage.catalog_db import CatalogDB
from src.storage.review_db import ReviewDB

logger = logging.getLogger("price_compare.server")


def _reply(
    pending: Coroutine[Any, Any, ApiResponse],
) -> tuple[Response, int]:
    response = asyncio.run(pending)
    return jsonify(response.body), response.status


def _json_body() -> Any:
    """Decoded body, or ``None`` when it is missing or not JSON."""
    return request.get_json(silent=True)


def create_app(
    catalog: CatalogStore | None = None,
    reviews: ReviewStore | None = None,
) -> Flask:
    """Build the app; opens the SQLite stores unless given others."""
    api = ApiHandlers(catalog or CatalogDB(), reviews or ReviewDB())
    app = Flask("price_compare")
    app.json.sort_keys = False  # type: ignore[attr-defined]

    @app.get("/api/products")
    def list_products() -> tuple[Response, int]:
        return _reply(api.list_products(request.args.get("limit")))

    @app.get("/api/products/search")
    def search_products() -> tuple[Response, int]:
        return _reply(api.search_products(request.args.get("q")))

    @app.get("/api/products/<product_id>")
    def get_product(product_id: str) -> tuple[Response, int]:
        return _reply(api.get_product(product_id))

    @app.post("/api/products")
    def create_product() -> tuple[Response, int]:
        return _reply(api.create_product(_json_body()))

    @app.get("/api/products/<product_id>/listings")
    def get_product_listings(product_id: str) -> tuple[Response, int]:
        return _reply(api.get_product_listings(product_id))

    @app.post("/api/products/<product_id>/listings")
    def create_listing(product_id: str) -> tuple[Response, int]:
        return _reply(api.create_listing(product_id, _json_body()))

    @app.get("/api/listings/<listing_id>/reviews")
    def get_listing_reviews(listing_id: str) -> tuple[Response, int]:
        return _reply(api.get_listing_reviews(listing_id))

    @app.post("/api/listings/<listing_id>/reviews")
    def create_review(listing_id: str) -> tuple[Response, int]:
        return _reply(api.create_review(listing_id, _json_body()))

    @app.get("/api/categories")
    def list_categories() -> tuple[Response, int]:
        return _reply(api.list_categories())

    @app.get("/api/categories/popular")
    def list_popular_categories() -> tuple[Response, int]:
        return _reply(api.list_popular_categories())

    @app.post("/api/categories")
    def create_category() -> tuple[Response, int]:
        return _reply(api.create_category(_json_body()))

    @app.post("/api/compare")
    def compare() -> tuple[Response, int]:
        return _reply(api.compare(_json_body()))

    @app.get("/api/comparisons/<comparison_id>")
    def get_comparison(comparison_id: str) -> tuple[Response, int]:
        return _reply(api.get_comparison(comparison_id))

    @app.get("/api/users/<user_id>/comparisons")
    def get_user_comparisons(user_id: str) -> tuple[Response, int]:
        return _reply(api.get_user_comparisons(user_id))

    @app.errorhandler(404)
    def not_found(_exc: Exception) -> tuple[Response, int]:
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_exc: Exception) -> tuple[Response, int]:
        return jsonify({"message": "Method not allowed"}), 405

    return app


def serve(host: str | None = None, port: int | None = None) -> int:
    """Run the development server until interrupted."""
    catalog, reviews = CatalogDB(), ReviewDB()
    app = create_app(catalog, reviews)
    bind_host = host or Settings.API_HOST
    bind_port = port or Settings.API_PORT
    logger.info("Serving API on http://%s:%d", bind_host, bind_port)
    try:
        app.run(host=bind_host, port=bind_port)
    finally:
        catalog.close()
        reviews.close()
        logger.info("API server stopped")
    return 0
