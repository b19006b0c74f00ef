"""
Normalization of raw upstream payloads into explorer contracts.
"""

from .response_wrappers import (
    extract_products,
    normalize_category_names,
    normalize_page,
    normalize_product_lookup,
    paginate_locally,
)

__all__ = [
    "extract_products",
    "normalize_category_names",
    "normalize_page",
    "normalize_product_lookup",
    "paginate_locally",
]
