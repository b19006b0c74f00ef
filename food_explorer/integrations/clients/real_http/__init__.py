"""
Real HTTP integration clients.

- openfoodfacts: the upstream product database gateway
- explorer_api: a client for this service's own HTTP surface (the counterpart
  of the browser-side API module)

Important:
- OpenFoodFactsClient must implement the same interface as the mock client
- Callers receive raw JSON; shaping happens in food_explorer.integrations.policy
"""

from .explorer_api import ExplorerAPIClient
from .openfoodfacts import OpenFoodFactsClient

__all__ = ["ExplorerAPIClient", "OpenFoodFactsClient"]
