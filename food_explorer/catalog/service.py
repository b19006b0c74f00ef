"""
Catalog service: one query strategy per explorer endpoint.

Listing operations (name search, category, popular) never fail for upstream
reasons; every upstream error is logged here and degrades to an empty envelope.
Barcode lookups and the category enumeration propagate upstream errors so the
HTTP layer can report them. Missing required input raises InvalidRequest before
any upstream call is made.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from food_explorer.catalog.slug import slugify_category
from food_explorer.integrations.contracts.interfaces import ProductDatabaseClient
from food_explorer.integrations.contracts.products import PageEnvelope, Product
from food_explorer.integrations.errors import InvalidRequest, UpstreamError, UpstreamTimeout, UpstreamUnavailable
from food_explorer.integrations.policy.response_wrappers import (
    extract_products,
    normalize_category_names,
    normalize_page,
    normalize_product_lookup,
    paginate_locally,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    """The dedicated category endpoint returned at least one product."""
    items: List[Product]


@dataclass(frozen=True)
class Empty:
    """The dedicated category endpoint gave nothing usable; reason is for logging."""
    reason: str


CategoryListing = Union[Ok, Empty]


class CatalogService:
    def __init__(
        self,
        client: ProductDatabaseClient,
        *,
        default_page_size: int = 24,
        max_page_size: int = 100,
        categories_limit: int = 50,
    ) -> None:
        self.client = client
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.categories_limit = categories_limit

    # --- Single-item and enumeration ------------------------------------------

    async def categories(self) -> List[str]:
        """Top category display names. Raises UpstreamError on failure."""
        raw = await self.client.list_categories()
        return normalize_category_names(raw, limit=self.categories_limit)

    async def lookup_barcode(self, code: str) -> Optional[Product]:
        """
        Look a product up by barcode.

        Returns None when the upstream has no such product.

        Raises:
            InvalidRequest: code is empty
            UpstreamError: transport or HTTP failure
        """
        code = (code or "").strip()
        if not code:
            raise InvalidRequest("Barcode is required")

        try:
            raw = await self.client.get_product(code)
        except UpstreamUnavailable as exc:
            if exc.status_code == 404:
                logger.info("Upstream has no product for barcode %s", code)
                return None
            raise
        return normalize_product_lookup(raw)

    # --- Listings -------------------------------------------------------------

    async def search_by_name(self, query: str, page: int = 1, page_size: Optional[int] = None) -> PageEnvelope:
        query = (query or "").strip()
        if not query:
            raise InvalidRequest("Search query is required")
        page, page_size = self._page_args(page, page_size)

        try:
            raw = await self.client.search(query, page, page_size)
        except UpstreamError as exc:
            logger.warning("Name search for %r failed (page=%s): %s", query, page, exc)
            return PageEnvelope.empty(page, page_size)
        return normalize_page(raw, fallback_page=page, fallback_page_size=page_size)

    async def by_category(self, category: str, page: int = 1, page_size: Optional[int] = None) -> PageEnvelope:
        """
        Two-phase category lookup.

        The dedicated category endpoint (addressed by slug) is tried first and, when
        it yields products, paginated locally. Otherwise the category-tag search is
        used with the raw label and server-side pagination. Callers cannot tell
        which path served the page.
        """
        label = (category or "").strip()
        if not label:
            raise InvalidRequest("Category is required")
        page, page_size = self._page_args(page, page_size)

        listing = await self._category_listing(slugify_category(label))
        if isinstance(listing, Ok):
            return paginate_locally(listing.items, page=page, page_size=page_size)

        logger.info("Category listing for %r unavailable (%s), using tag search", label, listing.reason)
        return await self._category_search(label, page, page_size)

    async def popular(self, page: int = 1, page_size: Optional[int] = None) -> PageEnvelope:
        page, page_size = self._page_args(page, page_size)
        try:
            raw = await self.client.popular(page, page_size)
        except UpstreamError as exc:
            logger.warning("Popular listing failed (page=%s): %s", page, exc)
            return PageEnvelope.empty(page, page_size)
        return normalize_page(raw, fallback_page=page, fallback_page_size=page_size)

    # --- Category strategies --------------------------------------------------

    async def _category_listing(self, slug: str) -> CategoryListing:
        if not slug:
            return Empty("empty_slug")
        try:
            raw = await self.client.get_category(slug)
        except UpstreamTimeout as exc:
            logger.info("Category endpoint timed out for %s: %s", slug, exc)
            return Empty("timeout")
        except UpstreamError as exc:
            logger.info("Category endpoint failed for %s: %s", slug, exc)
            return Empty("unavailable")

        items = extract_products(raw)
        return Ok(items) if items else Empty("no_items")

    async def _category_search(self, label: str, page: int, page_size: int) -> PageEnvelope:
        try:
            raw = await self.client.search_by_category_tag(label, page, page_size)
        except UpstreamError as exc:
            logger.warning("Category search for %r failed (page=%s): %s", label, page, exc)
            return PageEnvelope.empty(page, page_size)
        return normalize_page(raw, fallback_page=page, fallback_page_size=page_size)

    def _page_args(self, page: int, page_size: Optional[int]) -> Tuple[int, int]:
        if page_size is None:
            page_size = self.default_page_size
        if page < 1:
            raise InvalidRequest(f"page must be >= 1; got {page}")
        if not 1 <= page_size <= self.max_page_size:
            raise InvalidRequest(f"pageSize must be between 1 and {self.max_page_size}; got {page_size}")
        return page, page_size
