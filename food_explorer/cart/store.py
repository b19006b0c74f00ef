"""
Shopping cart held by one client session.

The store is created when a session starts and passed explicitly to whatever
needs it; it makes no network calls. With a storage backend it restores its
entries on creation and writes through after every mutation.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from food_explorer.integrations.contracts.products import Product

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "cart"


@dataclass(frozen=True)
class CartEntry:
    product: Product
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1; got {self.quantity}")


class CartStore:
    def __init__(self, storage=None, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self._entries: Dict[str, CartEntry] = {}
        self._storage = storage
        self._storage_key = storage_key
        if storage is not None:
            self._restore()

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product) -> CartEntry:
        """Add one unit; a product already in the cart has its quantity incremented."""
        entry = self._entries.get(product.code)
        if entry is None:
            entry = CartEntry(product=product, quantity=1)
        else:
            entry = dataclasses.replace(entry, quantity=entry.quantity + 1)
        self._entries[product.code] = entry
        self._persist()
        return entry

    def set_quantity(self, code: str, quantity: int) -> None:
        """Set an entry's quantity; zero or less removes it. Unknown codes are ignored."""
        if quantity <= 0:
            self.remove(code)
            return
        entry = self._entries.get(code)
        if entry is None:
            return
        self._entries[code] = dataclasses.replace(entry, quantity=quantity)
        self._persist()

    def remove(self, code: str) -> None:
        if self._entries.pop(code, None) is not None:
            self._persist()

    def clear(self) -> None:
        self._entries.clear()
        self._persist()

    # --- Reads ----------------------------------------------------------------

    def get(self, code: str) -> Optional[CartEntry]:
        return self._entries.get(code)

    def entries(self) -> List[CartEntry]:
        """Entries in the order they were first added."""
        return list(self._entries.values())

    def total_item_count(self) -> int:
        return sum(entry.quantity for entry in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    # --- Persistence ----------------------------------------------------------

    def to_payload(self) -> List[Dict[str, Any]]:
        return [
            {"product": entry.product.model_dump(mode="json", by_alias=True), "quantity": entry.quantity}
            for entry in self._entries.values()
        ]

    def _persist(self) -> None:
        if self._storage is None:
            return
        self._storage.set(self._storage_key, self.to_payload())

    def _restore(self) -> None:
        payload = self._storage.get(self._storage_key)
        if payload is None:
            return
        if not isinstance(payload, list):
            logger.warning("Stored cart under %r is not a list; starting empty", self._storage_key)
            return

        for item in payload:
            try:
                product = Product.from_api(item["product"])
                quantity = int(item["quantity"])
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning("Skipping unreadable stored cart entry: %s", e)
                continue
            if quantity > 0:
                self._entries[product.code] = CartEntry(product=product, quantity=quantity)
