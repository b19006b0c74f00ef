"""
Category name normalization for the upstream category-listing URLs.
"""

import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")


def slugify_category(category: str) -> str:
    """
    Turn a category display name into its URL slug.

    "Breakfast  Cereals" -> "breakfast-cereals", "Crème fraîche" -> "crme-frache".
    The result matches ^[a-z0-9]+(-[a-z0-9]+)*$ or is empty, and
    slugify_category(slugify_category(x)) == slugify_category(x).
    """
    slug = (category or "").lower().strip()
    slug = _WHITESPACE.sub("-", slug)
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")
