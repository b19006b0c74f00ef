"""
Catalog querying: category slugs, per-endpoint strategies, session orchestration and sorting.
"""

from .orchestrator import FilterKind, FilterState, QueryOrchestrator
from .service import CatalogService, Empty, Ok
from .slug import slugify_category
from .sorting import DEFAULT_SORT, SortOption, sort_products

__all__ = [
    "CatalogService",
    "DEFAULT_SORT",
    "Empty",
    "FilterKind",
    "FilterState",
    "Ok",
    "QueryOrchestrator",
    "SortOption",
    "slugify_category",
    "sort_products",
]
