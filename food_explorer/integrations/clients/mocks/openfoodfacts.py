"""
Mock Open Food Facts Client.

Purpose:
- Serves a small in-memory catalogue shaped like the real upstream JSON
- Does NOT make any network calls

Usage:
- Wired in food_explorer.api.main when INTEGRATIONS_MODE=mock
- Used by tests; every call is recorded in `calls`, and `failures` lets a test
  make a given operation raise (e.g. {"get_category": UpstreamTimeout("...")})

Swap:
The real client lives in clients/real_http/openfoodfacts.py.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

from food_explorer.integrations.contracts.interfaces import ProductDatabaseClient
from food_explorer.integrations.errors import CatalogError

DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {
        "code": "3017620422003",
        "product_name": "Nutella",
        "brands": "Ferrero",
        "quantity": "400 g",
        "categories": "Spreads, Sweet spreads, Hazelnut spreads, Chocolate spreads",
        "categories_tags": ["en:spreads", "en:sweet-spreads", "en:hazelnut-spreads", "en:chocolate-spreads"],
        "ingredients_text": "Sugar, palm oil, hazelnuts 13%, skimmed milk powder 8.7%, fat-reduced cocoa 7.4%",
        "nutriscore_grade": "e",
        "nutriscore_score": 26,
        "nutriments": {
            "energy-kcal_100g": 539,
            "fat_100g": 30.9,
            "carbohydrates_100g": 57.5,
            "sugars_100g": 56.3,
            "proteins_100g": 6.3,
            "salt_100g": 0.107,
        },
        "image_url": "https://images.openfoodfacts.org/images/products/301/762/042/2003/front_en.jpg",
        "unique_scans_n": 9800,
    },
    {
        "code": "5449000000996",
        "product_name": "Coca-Cola",
        "brands": "Coca-Cola",
        "quantity": "330 ml",
        "categories": "Beverages, Carbonated drinks, Sodas, Colas",
        "categories_tags": ["en:beverages", "en:carbonated-drinks", "en:sodas", "en:colas"],
        "ingredients_text": "Carbonated water, sugar, colour (caramel E150d), acid (phosphoric acid), natural flavourings, caffeine",
        "nutriscore_grade": "e",
        "nutriments": {"energy-kcal_100g": 42, "carbohydrates_100g": 10.6, "sugars_100g": 10.6, "salt_100g": 0},
        "unique_scans_n": 8700,
    },
    {
        "code": "3274080005003",
        "product_name": "Eau de source",
        "product_name_en": "Spring water",
        "brands": "Cristaline",
        "quantity": "1.5 l",
        "categories": "Beverages, Waters, Spring waters",
        "categories_tags": ["en:beverages", "en:waters", "en:spring-waters"],
        "nutriscore_grade": "a",
        "nutriments": {"energy-kcal_100g": 0},
        "unique_scans_n": 7600,
    },
    {
        "code": "7622210449283",
        "product_name": "Prince chocolat",
        "brands": "LU",
        "quantity": "300 g",
        "categories": "Snacks, Sweet snacks, Biscuits and cakes, Biscuits, Chocolate biscuits",
        "categories_tags": ["en:snacks", "en:sweet-snacks", "en:biscuits-and-cakes", "en:biscuits", "en:chocolate-biscuits"],
        "ingredients_text": "Wheat flour 50%, sugar, vegetable oils, fat-reduced cocoa powder 4.5%",
        "nutriscore_grade": "d",
        "nutriments": {"energy-kcal_100g": 465, "fat_100g": 17, "sugars_100g": 32, "proteins_100g": 6.3, "fiber_100g": 3.8},
        "unique_scans_n": 5400,
    },
    {
        "code": "3175680011480",
        "product_name": "Gerblé sésame",
        "brands": "Gerblé",
        "quantity": "230 g",
        "categories": "Snacks, Sweet snacks, Biscuits and cakes, Biscuits",
        "categories_tags": ["en:snacks", "en:sweet-snacks", "en:biscuits-and-cakes", "en:biscuits"],
        "nutriscore_grade": "c",
        "nutriments": {"energy-kcal_100g": 470, "fat_100g": 19, "sugars_100g": 18, "proteins_100g": 9.4},
        "unique_scans_n": 3100,
    },
    {
        "code": "8000500310427",
        "product_name": "Kinder Bueno",
        "brands": "Ferrero, Kinder",
        "quantity": "43 g",
        "categories": "Snacks, Sweet snacks, Cocoa and its products, Confectioneries, Chocolate candies",
        "categories_tags": ["en:snacks", "en:sweet-snacks", "en:cocoa-and-its-products", "en:confectioneries", "en:chocolate-candies"],
        "nutriscore_grade": "e",
        "nutriments": {"energy-kcal_100g": 572, "fat_100g": 37.3, "sugars_100g": 41.2, "proteins_100g": 8.6},
        "unique_scans_n": 4200,
    },
    {
        "code": "20724696",
        "product_name": "Plain Greek style yogurt",
        "brands": "Milbona",
        "quantity": "500 g",
        "categories": "Dairies, Fermented foods, Fermented milk products, Yogurts, Greek-style yogurts",
        "categories_tags": ["en:dairies", "en:fermented-foods", "en:fermented-milk-products", "en:yogurts", "en:greek-style-yogurts"],
        "nutriscore_grade": "b",
        "nutriments": {"energy-kcal_100g": 122, "fat_100g": 10, "sugars_100g": 3.7, "proteins_100g": 3.3},
        "unique_scans_n": 1900,
    },
    {
        "code": "0737628064502",
        "product_name": "Thai peanut noodle kit",
        "brands": "Simply Asia",
        "quantity": "155 g",
        "categories": "Plant-based foods and beverages, Cereals and potatoes, Noodles",
        "categories_tags": ["en:plant-based-foods-and-beverages", "en:cereals-and-potatoes", "en:noodles"],
        "nutriments": {"energy-kcal_100g": 385, "fat_100g": 7.7, "proteins_100g": 9.6},
        "unique_scans_n": 800,
    },
]


class MockOpenFoodFactsClient(ProductDatabaseClient):
    def __init__(
        self,
        products: Optional[List[Dict[str, Any]]] = None,
        failures: Optional[Dict[str, CatalogError]] = None,
    ) -> None:
        self.products: List[Dict[str, Any]] = copy.deepcopy(DEFAULT_PRODUCTS if products is None else products)
        self.failures: Dict[str, CatalogError] = dict(failures or {})
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        error = self.failures.get(operation)
        if error is not None:
            raise error

    def calls_to(self, operation: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    # --- Upstream operations --------------------------------------------------

    async def search(self, terms: str, page: int, page_size: int) -> Any:
        self._record("search", terms, page, page_size)
        needle = terms.strip().lower()
        matches = [
            p for p in self.products
            if needle in (p.get("product_name") or "").lower()
            or needle in (p.get("product_name_en") or "").lower()
            or needle in (p.get("brands") or "").lower()
        ]
        return _search_page(matches, page, page_size)

    async def get_product(self, code: str) -> Any:
        self._record("get_product", code)
        for p in self.products:
            if p.get("code") == code:
                return {"code": code, "status": 1, "status_verbose": "product found", "product": copy.deepcopy(p)}
        return {"code": code, "status": 0, "status_verbose": "product not found"}

    async def get_category(self, slug: str) -> Any:
        self._record("get_category", slug)
        tag = f"en:{slug}"
        matches = [p for p in self.products if tag in (p.get("categories_tags") or [])]
        return {"count": len(matches), "products": copy.deepcopy(matches)}

    async def search_by_category_tag(self, label: str, page: int, page_size: int) -> Any:
        self._record("search_by_category_tag", label, page, page_size)
        needle = label.strip().lower()
        matches = [
            p for p in self.products
            if needle in (p.get("categories") or "").lower()
            or any(needle in t.lower() for t in (p.get("categories_tags") or []))
        ]
        return _search_page(matches, page, page_size)

    async def popular(self, page: int, page_size: int) -> Any:
        self._record("popular", page, page_size)
        ranked = sorted(self.products, key=lambda p: p.get("unique_scans_n") or 0, reverse=True)
        return _search_page(ranked, page, page_size)

    async def list_categories(self) -> Any:
        self._record("list_categories")
        counts: Dict[str, int] = {}
        for p in self.products:
            for tag in p.get("categories_tags") or []:
                counts[tag] = counts.get(tag, 0) + 1
        tags = [
            {"id": tag, "name": tag.split(":", 1)[-1].replace("-", " ").capitalize(), "products": n}
            for tag, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]
        return {"count": len(tags), "tags": tags}


def _search_page(matches: List[Dict[str, Any]], page: int, page_size: int) -> Dict[str, Any]:
    # Mirrors the upstream search response, where page_count is the number of
    # products returned on this page.
    start = (page - 1) * page_size
    items = copy.deepcopy(matches[start:start + page_size])
    return {
        "count": len(matches),
        "page": page,
        "page_size": page_size,
        "page_count": len(items),
        "skip": start,
        "products": items,
    }
