"""
Explorer HTTP API Client.

Purpose:
- Talks to this service's own HTTP surface (/api/...) from Python callers,
  e.g. a QueryOrchestrator running in a separate process or the CLI
- Exposes the same catalog methods as food_explorer.catalog.service.CatalogService

Behavior:
- Any failure (transport, non-2xx, malformed body) is logged and degrades to an
  empty envelope, None or an empty list, so a caller's view never breaks
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from food_explorer.integrations.contracts.products import PageEnvelope, Product

logger = logging.getLogger(__name__)


class ExplorerAPIClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        timeout_seconds: float = 35.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            return await client.get(f"{self.base_url}{path}", params=params)

    async def _get_envelope(self, path: str, params: Dict[str, Any], page: int, page_size: int) -> PageEnvelope:
        try:
            response = await self._get(path, params)
            response.raise_for_status()
            return PageEnvelope.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error("Error fetching %s: %s", path, e)
            return PageEnvelope.empty(page, page_size)

    async def search_by_name(self, query: str, page: int = 1, page_size: int = 24) -> PageEnvelope:
        params = {"q": query, "page": page, "pageSize": page_size}
        return await self._get_envelope("/products/search", params, page, page_size)

    async def by_category(self, category: str, page: int = 1, page_size: int = 24) -> PageEnvelope:
        params = {"category": category, "page": page, "pageSize": page_size}
        return await self._get_envelope("/products/category", params, page, page_size)

    async def popular(self, page: int = 1, page_size: int = 24) -> PageEnvelope:
        params = {"page": page, "pageSize": page_size}
        return await self._get_envelope("/products/popular", params, page, page_size)

    async def lookup_barcode(self, code: str) -> Optional[Product]:
        try:
            response = await self._get("/products/barcode", {"code": code})
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
            return Product.from_api(data) if isinstance(data, dict) else None
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error("Error fetching product by barcode %s: %s", code, e)
            return None

    async def categories(self) -> List[str]:
        try:
            response = await self._get("/categories")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching categories: %s", e)
            return []
        return [str(name) for name in data] if isinstance(data, list) else []
