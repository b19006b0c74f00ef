"""
Query orchestration for an explorer session.

The orchestrator holds the filter state of one client session, decides which
single query to issue after each edit (barcode > name > category > popular),
and accumulates pages for "load more".

It drives any catalog backend exposing the CatalogService methods
(search_by_name, lookup_barcode, by_category, popular): the in-process
CatalogService or the ExplorerAPIClient for a remote explorer service.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from food_explorer.catalog.sorting import DEFAULT_SORT, SortOption, sort_products
from food_explorer.integrations.contracts.products import PageEnvelope, Product
from food_explorer.integrations.errors import CatalogError

logger = logging.getLogger(__name__)


class FilterKind(str, Enum):
    BARCODE = "barcode"
    NAME = "name"
    CATEGORY = "category"
    POPULAR = "popular"


@dataclass(frozen=True)
class FilterState:
    barcode: str = ""
    name: str = ""
    category: str = ""

    def resolve(self) -> Tuple[FilterKind, str]:
        """The active filter and its trimmed value."""
        barcode = (self.barcode or "").strip()
        if barcode:
            return FilterKind.BARCODE, barcode
        name = (self.name or "").strip()
        if name:
            return FilterKind.NAME, name
        category = (self.category or "").strip()
        if category:
            return FilterKind.CATEGORY, category
        return FilterKind.POPULAR, ""


class QueryOrchestrator:
    def __init__(self, catalog, page_size: int = 24) -> None:
        self.catalog = catalog
        self.page_size = page_size
        self.filters = FilterState()
        self.mode = FilterKind.POPULAR
        self.items: List[Product] = []
        self.page = 0
        self.page_count = 0
        self.total_count = 0
        self.is_loading = False
        self.is_loading_more = False
        # Bumped on every filter change; responses carrying an older token are dropped
        self._generation = 0

    @property
    def has_more(self) -> bool:
        return self.mode is not FilterKind.BARCODE and self.page < self.page_count

    # --- Transitions ----------------------------------------------------------

    async def apply(self, filters: FilterState) -> bool:
        """
        Make `filters` current and load the first page of the winning query.

        Returns False when a newer filter change superseded this one before its
        response arrived; the stale response is discarded.
        """
        self._generation += 1
        token = self._generation
        self.filters = filters
        kind, value = filters.resolve()
        self.mode = kind
        self.is_loading = True
        self.is_loading_more = False

        try:
            if kind is FilterKind.BARCODE:
                envelope = await self._lookup(value)
            else:
                envelope = await self._fetch_page(kind, value, 1)
        finally:
            if token == self._generation:
                self.is_loading = False

        if token != self._generation:
            logger.debug("Discarding stale %s response (token %s, latest %s)", kind.value, token, self._generation)
            return False

        self.items = list(envelope.items)
        self.page = envelope.page
        self.page_count = envelope.page_count
        self.total_count = envelope.total_count
        return True

    async def update_filters(self, **changes: str) -> bool:
        """Edit one or more filters, keeping the others, and re-query."""
        return await self.apply(dataclasses.replace(self.filters, **changes))

    async def search_by_name(self, query: str) -> bool:
        return await self.apply(FilterState(name=query))

    async def search_by_barcode(self, code: str) -> bool:
        if not (code or "").strip():
            return False
        return await self.apply(FilterState(barcode=code))

    async def select_category(self, category: str) -> bool:
        return await self.apply(FilterState(category=category))

    async def reset(self) -> bool:
        return await self.apply(FilterState())

    async def load_more(self) -> bool:
        """
        Append the next page of the current query.

        No-op (False) while loading, in barcode mode, or once page >= page_count.
        """
        if self.is_loading or self.is_loading_more or not self.has_more:
            return False

        token = self._generation
        kind, value = self.filters.resolve()
        requested = self.page + 1
        self.is_loading_more = True
        try:
            envelope = await self._fetch_page(kind, value, requested)
        finally:
            if token == self._generation:
                self.is_loading_more = False

        if token != self._generation:
            logger.debug("Discarding stale load-more page %s", requested)
            return False
        if not envelope.items:
            logger.info("Load-more page %s came back empty; keeping page %s", requested, self.page)
            return False
        if envelope.page <= self.page:
            # The server clamped the page; its items are a repeat of what we hold
            logger.warning("Server returned page %s for requested page %s", envelope.page, requested)
            self.page_count = self.page
            return False

        self.items.extend(envelope.items)
        self.page = envelope.page
        self.page_count = envelope.page_count
        self.total_count = envelope.total_count
        return True

    # --- Views ----------------------------------------------------------------

    def sorted_items(self, option=DEFAULT_SORT) -> List[Product]:
        return sort_products(self.items, SortOption(option))

    # --- Helpers --------------------------------------------------------------

    async def _lookup(self, code: str) -> PageEnvelope:
        product: Optional[Product]
        try:
            product = await self.catalog.lookup_barcode(code)
        except CatalogError as exc:
            logger.warning("Barcode lookup for %s failed: %s", code, exc)
            product = None
        if product is None:
            return PageEnvelope.empty(1, 1)
        return PageEnvelope(items=[product], total_count=1, page=1, page_size=1, page_count=1)

    async def _fetch_page(self, kind: FilterKind, value: str, page: int) -> PageEnvelope:
        try:
            if kind is FilterKind.NAME:
                return await self.catalog.search_by_name(value, page, self.page_size)
            if kind is FilterKind.CATEGORY:
                return await self.catalog.by_category(value, page, self.page_size)
            return await self.catalog.popular(page, self.page_size)
        except CatalogError as exc:
            logger.warning("%s query failed (page=%s): %s", kind.value, page, exc)
            return PageEnvelope.empty(page, self.page_size)
