"""
Session-scoped shopping cart and its client-side storage backends.
"""

from .storage import JsonFileStorage, MemoryStorage
from .store import CartEntry, CartStore

__all__ = ["CartEntry", "CartStore", "JsonFileStorage", "MemoryStorage"]
