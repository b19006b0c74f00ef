"""
Contracts (data models).

This folder defines the shapes exchanged with the upstream product database and
served by the explorer:
- Product / Nutriments as served to clients
- PageEnvelope, the stable pagination wrapper
- ProductDatabaseClient, the interface both the real and mock upstream clients implement

Both mock and real HTTP clients should be consumed through these contracts.
"""

from .interfaces import ProductDatabaseClient
from .products import NUTRITION_GRADES, Nutriments, PageEnvelope, Product

__all__ = ["NUTRITION_GRADES", "Nutriments", "PageEnvelope", "Product", "ProductDatabaseClient"]
