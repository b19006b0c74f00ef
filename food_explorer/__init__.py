"""food_explorer - Open Food Facts catalog explorer: search, pagination envelope, sorting and cart"""

__version__ = "1.0.0"

from food_explorer.cart import CartStore, JsonFileStorage
from food_explorer.catalog import CatalogService, FilterState, QueryOrchestrator, slugify_category
from food_explorer.integrations import PageEnvelope, Product

__all__ = [
    "CartStore",
    "CatalogService",
    "FilterState",
    "JsonFileStorage",
    "PageEnvelope",
    "Product",
    "QueryOrchestrator",
    "slugify_category",
]
