"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- the upstream database should not be hit (offline development, demos)
- we want to test flows end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.

Switching to real:
INTEGRATIONS_MODE selects the implementation in food_explorer/api/main.py.
"""

from .openfoodfacts import DEFAULT_PRODUCTS, MockOpenFoodFactsClient

__all__ = ["DEFAULT_PRODUCTS", "MockOpenFoodFactsClient"]
