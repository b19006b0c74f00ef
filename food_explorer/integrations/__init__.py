"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the Open Food Facts product database (real HTTP client and in-memory mock)
- this service's own HTTP surface, for Python callers

Key rule:
- Catalog code MUST NOT call external APIs directly.
- It should call integration clients (under food_explorer/integrations/clients)
  and shape their raw payloads with food_explorer/integrations/policy.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (food_explorer/api/main.py).
"""

from .contracts import NUTRITION_GRADES, Nutriments, PageEnvelope, Product, ProductDatabaseClient
from .errors import (
    CatalogError,
    InvalidRequest,
    NotFound,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
)

__all__ = [
    # contracts
    "NUTRITION_GRADES", "Nutriments", "PageEnvelope", "Product", "ProductDatabaseClient",
    # errors
    "CatalogError", "InvalidRequest", "NotFound", "UpstreamError",
    "UpstreamTimeout", "UpstreamUnavailable",
]
