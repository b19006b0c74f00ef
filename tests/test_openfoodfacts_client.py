import asyncio

import httpx
import pytest
import redis

from food_explorer.catalog.orchestrator import QueryOrchestrator
from food_explorer.catalog.service import CatalogService
from food_explorer.database import redis_real
from food_explorer.database.redis import ResponseCache
from food_explorer.database.redis_real import RedisResponseCache
from food_explorer.integrations.clients.real_http.openfoodfacts import OpenFoodFactsClient
from food_explorer.integrations.errors import UpstreamTimeout, UpstreamUnavailable
from food_explorer.utils.config_loader import CacheConfig, UpstreamConfig


def _client(handler, cache=None, **config):
    return OpenFoodFactsClient(
        UpstreamConfig(base_url="https://off.test", **config),
        cache=cache,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_search_sends_upstream_query_and_returns_json():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"count": 1, "products": [{"code": "1"}]})

    data = await _client(handler).search("nutella", 2, 24)

    assert data["count"] == 1
    request = seen[0]
    assert request.url.path == "/cgi/search.pl"
    assert request.url.params["search_terms"] == "nutella"
    assert request.url.params["page"] == "2"
    assert request.url.params["page_size"] == "24"
    assert request.url.params["json"] == "true"
    assert request.headers["user-agent"].startswith("FoodProductExplorer")


@pytest.mark.asyncio
async def test_category_tag_search_and_popular_params():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"products": []})

    client = _client(handler)
    await client.search_by_category_tag("Breakfast cereals", 1, 10)
    await client.popular(3, 24)

    tag_params, popular_params = seen[0].url.params, seen[1].url.params
    assert tag_params["tagtype_0"] == "categories"
    assert tag_params["tag_contains_0"] == "contains"
    assert tag_params["tag_0"] == "Breakfast cereals"
    assert popular_params["action"] == "process"
    assert popular_params["sort_by"] == "popularity"
    assert popular_params["page"] == "3"


@pytest.mark.asyncio
async def test_product_category_and_categories_paths():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json={})

    client = _client(handler)
    await client.get_product("3017620422003")
    await client.get_category("breakfast-cereals")
    await client.list_categories()

    assert paths == [
        "/api/v0/product/3017620422003.json",
        "/category/breakfast-cereals.json",
        "/categories.json",
    ]


@pytest.mark.asyncio
async def test_http_error_status_raises_unavailable_with_status_code():
    client = _client(lambda request: httpx.Response(503, text="maintenance"))

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await client.popular(1, 24)

    assert excinfo.value.status_code == 503
    assert excinfo.value.url == "https://off.test/cgi/search.pl"


@pytest.mark.asyncio
async def test_transport_timeout_raises_upstream_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(UpstreamTimeout):
        await _client(handler).list_categories()


@pytest.mark.asyncio
async def test_connection_error_raises_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailable) as excinfo:
        await _client(handler).list_categories()

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_raises_unavailable():
    client = _client(lambda request: httpx.Response(200, text="<html>not json</html>"))

    with pytest.raises(UpstreamUnavailable, match="invalid JSON"):
        await client.get_product("123")


@pytest.mark.asyncio
async def test_slow_upstream_is_cut_off_by_the_ceiling():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    client = _client(handler, timeout_seconds=0.05)

    with pytest.raises(UpstreamTimeout):
        await client.popular(1, 24)


@pytest.mark.asyncio
async def test_successful_responses_are_cached_per_url():
    calls = []

    def handler(request):
        calls.append(str(request.url))
        return httpx.Response(200, json={"tags": [{"id": "en:snacks", "name": "Snacks"}]})

    client = _client(handler, cache=ResponseCache())

    first = await client.list_categories()
    second = await client.list_categories()
    await client.search("tea", 1, 24)
    await client.search("tea", 2, 24)

    assert first == second
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_failures_are_not_cached():
    responses = [httpx.Response(500), httpx.Response(200, json={"ok": True})]
    client = _client(lambda request: responses.pop(0), cache=ResponseCache())

    with pytest.raises(UpstreamUnavailable):
        await client.list_categories()
    assert await client.list_categories() == {"ok": True}


@pytest.mark.asyncio
async def test_cache_disabled_by_config():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    client = OpenFoodFactsClient(
        UpstreamConfig(base_url="https://off.test"),
        cache=ResponseCache(),
        cache_config=CacheConfig(enabled=False),
        transport=httpx.MockTransport(handler),
    )
    await client.list_categories()
    await client.list_categories()

    assert client.cache is None
    assert len(calls) == 2


class DownRedis:
    async def get(self, key):
        raise redis.ConnectionError("Connection refused")

    async def setex(self, key, ttl, value):
        raise redis.ConnectionError("Connection refused")


@pytest.fixture
def down_redis_cache(monkeypatch):
    monkeypatch.setattr(redis_real.aioredis, "from_url", lambda url, decode_responses: DownRedis())
    return RedisResponseCache(url="redis://localhost:6379/0")


def _product_handler(request):
    return httpx.Response(200, json={"code": "1", "status": 1, "product": {"code": "1", "product_name": "Tea"}})


@pytest.mark.asyncio
async def test_unreachable_redis_does_not_fail_upstream_calls(down_redis_cache):
    client = _client(_product_handler, cache=down_redis_cache)

    data = await client.get_product("1")

    assert data["product"]["product_name"] == "Tea"


@pytest.mark.asyncio
async def test_unreachable_redis_keeps_lookups_working(down_redis_cache):
    service = CatalogService(_client(_product_handler, cache=down_redis_cache))
    orchestrator = QueryOrchestrator(service)

    product = await service.lookup_barcode("1")
    assert await orchestrator.search_by_barcode("1")

    assert product.display_name == "Tea"
    assert [p.code for p in orchestrator.items] == ["1"]
