"""
Open Food Facts HTTP Client.

Purpose:
- Issues timeboxed GET requests to the public Open Food Facts database
- Returns the decoded JSON unchanged; shaping happens in integrations.policy

Implementation notes:
- Uses httpx for async requests; a fixed ceiling is enforced with asyncio.wait_for
- Transport failures are translated into UpstreamTimeout / UpstreamUnavailable
- Never retries; the upstream is a public, rate-limited API
- Successful responses may be cached per URL for the TTL of their cache hint

Important:
- Keep this client as the ONLY place where Open Food Facts HTTP calls are made.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from food_explorer.integrations.contracts.interfaces import ProductDatabaseClient
from food_explorer.integrations.errors import UpstreamTimeout, UpstreamUnavailable
from food_explorer.utils.config_loader import CacheConfig, UpstreamConfig

logger = logging.getLogger(__name__)


class OpenFoodFactsClient(ProductDatabaseClient):
    def __init__(
        self,
        config: Optional[UpstreamConfig] = None,
        cache=None,
        cache_config: Optional[CacheConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or UpstreamConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.cache_config = cache_config or CacheConfig()
        self.cache = cache if self.cache_config.enabled else None
        self._transport = transport

    # --- Gateway --------------------------------------------------------------

    async def fetch_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        timeout_seconds: Optional[float] = None,
        cache_ttl: int = 0,
    ) -> Any:
        """
        GET a JSON document from the upstream.

        Raises:
            UpstreamTimeout: the request did not complete within the timeout
            UpstreamUnavailable: network failure, non-2xx status or invalid JSON
        """
        url = f"{self.base_url}{path}"
        cache_key = str(httpx.URL(url, params=params))
        if self.cache is not None and cache_ttl > 0:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Upstream cache hit: %s", cache_key)
                return cached

        timeout = timeout_seconds or self.config.timeout_seconds
        try:
            data = await asyncio.wait_for(self._get(url, params, timeout), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise UpstreamTimeout(f"Upstream request timed out after {timeout:g}s", url=url) from exc

        if self.cache is not None and cache_ttl > 0:
            await self.cache.set(cache_key, data, ttl=cache_ttl)
        return data

    async def _get(self, url: str, params: Optional[Dict[str, Any]], timeout: float) -> Any:
        headers = {"User-Agent": self.config.user_agent, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                headers=headers,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as exc:
            raise UpstreamTimeout(f"Upstream request timed out: {exc}", url=url) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise UpstreamUnavailable(
                f"Upstream responded with HTTP {status_code}",
                url=url,
                status_code=status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailable(f"Upstream request failed: {exc}", url=url) from exc
        except ValueError as exc:
            raise UpstreamUnavailable("Upstream returned invalid JSON", url=url) from exc

    # --- Upstream operations --------------------------------------------------

    async def search(self, terms: str, page: int, page_size: int) -> Any:
        params = {
            "search_terms": terms,
            "page_size": page_size,
            "page": page,
            "json": "true",
        }
        return await self.fetch_json("/cgi/search.pl", params, cache_ttl=self.cache_config.listing_ttl)

    async def get_product(self, code: str) -> Any:
        return await self.fetch_json(
            f"/api/v0/product/{quote(code, safe='')}.json",
            timeout_seconds=self.config.lookup_timeout_seconds,
            cache_ttl=self.cache_config.product_ttl,
        )

    async def get_category(self, slug: str) -> Any:
        return await self.fetch_json(f"/category/{quote(slug, safe='')}.json", cache_ttl=self.cache_config.listing_ttl)

    async def search_by_category_tag(self, label: str, page: int, page_size: int) -> Any:
        params = {
            "tagtype_0": "categories",
            "tag_contains_0": "contains",
            "tag_0": label,
            "page_size": page_size,
            "page": page,
            "json": "true",
        }
        return await self.fetch_json("/cgi/search.pl", params, cache_ttl=self.cache_config.listing_ttl)

    async def popular(self, page: int, page_size: int) -> Any:
        params = {
            "action": "process",
            "sort_by": "popularity",
            "page_size": page_size,
            "page": page,
            "json": "true",
        }
        return await self.fetch_json("/cgi/search.pl", params, cache_ttl=self.cache_config.listing_ttl)

    async def list_categories(self) -> Any:
        return await self.fetch_json("/categories.json", cache_ttl=self.cache_config.categories_ttl)
