#!/usr/bin/env python3
"""
Explore the product catalog from the terminal:
- resolve the filters (barcode > name > category > popular) and fetch page 1
- optionally load further pages
- print the sorted results, and optionally add them to a local cart file

Uses config/explorer_config.yml; --mock serves the built-in catalogue instead of
Open Food Facts, --api talks to a running explorer service instead of upstream.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from food_explorer.cart import CartStore, JsonFileStorage
from food_explorer.catalog import CatalogService, FilterState, QueryOrchestrator, SortOption
from food_explorer.database.redis import ResponseCache
from food_explorer.integrations.clients.mocks import MockOpenFoodFactsClient
from food_explorer.integrations.clients.real_http import ExplorerAPIClient, OpenFoodFactsClient
from food_explorer.utils.config_loader import load_explorer_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def build_catalog(args, cfg):
    if args.api:
        return ExplorerAPIClient(base_url=args.api)
    if args.mock:
        client = MockOpenFoodFactsClient()
    else:
        cache = ResponseCache(max_entries=cfg.cache.max_entries)
        client = OpenFoodFactsClient(cfg.upstream, cache=cache, cache_config=cfg.cache)
    return CatalogService(
        client,
        default_page_size=cfg.pagination.default_page_size,
        max_page_size=cfg.pagination.max_page_size,
        categories_limit=cfg.categories_limit,
    )


async def run(args) -> int:
    cfg = load_explorer_config(Path(args.config) if args.config else None)
    catalog = build_catalog(args, cfg)

    if args.list_categories:
        for name in await catalog.categories():
            print(name)
        return 0

    orchestrator = QueryOrchestrator(catalog, page_size=args.page_size)
    await orchestrator.apply(FilterState(barcode=args.barcode, name=args.name, category=args.category))
    for _ in range(args.pages - 1):
        if not await orchestrator.load_more():
            break

    print(f"\n### {orchestrator.mode.value} results "
          f"(page {orchestrator.page}/{orchestrator.page_count}, {orchestrator.total_count} total)\n")
    products = orchestrator.sorted_items(args.sort)
    if not products:
        print("No products found.")
        return 1

    for product in products:
        brand = f" - {product.brands}" if product.brands else ""
        print(f"[{product.grade_label:>3}] {product.code:<14} {product.display_name}{brand}")
        if args.details:
            print(f"      category: {product.primary_category or '-'}  image: {product.display_image_url or '-'}")

    if args.cart:
        cart = CartStore(storage=JsonFileStorage(args.cart))
        for product in products:
            cart.add(product)
        print(f"\nCart {args.cart}: {len(cart)} products, {cart.total_item_count()} items")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Explore Open Food Facts products")
    parser.add_argument("--barcode", default="", help="Look up a single product by barcode")
    parser.add_argument("--name", default="", help="Search products by name")
    parser.add_argument("--category", default="", help="Browse a category by display name")
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load (default: 1)")
    parser.add_argument("--page-size", type=int, default=24, help="Products per page (default: 24)")
    parser.add_argument("--sort", default=SortOption.NAME_ASC.value, choices=[o.value for o in SortOption])
    parser.add_argument("--list-categories", action="store_true", help="Print the top categories and exit")
    parser.add_argument("--details", action="store_true", help="Also print category and image URL per product")
    parser.add_argument("--cart", default="", help="Add every listed product to this cart file")
    parser.add_argument("--mock", action="store_true", help="Use the built-in mock catalogue")
    parser.add_argument("--api", default="", help="Base URL of a running explorer API, e.g. http://localhost:8000/api")
    parser.add_argument("--config", default="", help="Path to explorer config YAML")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    setup_logging(args.verbose)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
