"""
Response caches backing the upstream cache hints.

ResponseCache (in-memory) is used unless REDIS_URL is set, in which case
food_explorer.api.main wires redis_real.RedisResponseCache instead.
"""

from .redis import ResponseCache

__all__ = ["ResponseCache"]
