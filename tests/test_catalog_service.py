import pytest

from conftest import chocolate_catalogue, make_product_data
from food_explorer.catalog.service import CatalogService
from food_explorer.integrations.clients.mocks.openfoodfacts import MockOpenFoodFactsClient
from food_explorer.integrations.errors import InvalidRequest, UpstreamTimeout, UpstreamUnavailable


@pytest.mark.asyncio
async def test_search_by_name_requires_query_before_any_upstream_call(catalog_service, mock_client):
    with pytest.raises(InvalidRequest):
        await catalog_service.search_by_name("   ")

    assert mock_client.calls == []


@pytest.mark.asyncio
async def test_search_by_name_returns_normalized_envelope():
    service = CatalogService(MockOpenFoodFactsClient(products=chocolate_catalogue(50)))

    envelope = await service.search_by_name("chocolate", page=1, page_size=24)

    assert len(envelope.items) == 24
    assert envelope.total_count == 50
    assert envelope.page_count == 3
    assert envelope.has_more


@pytest.mark.asyncio
async def test_search_by_name_past_the_end_is_empty_with_stable_page_count():
    service = CatalogService(MockOpenFoodFactsClient(products=chocolate_catalogue(50)))

    envelope = await service.search_by_name("chocolate", page=4, page_size=24)

    assert envelope.items == []
    assert envelope.page == 4
    assert envelope.page_count == 3


@pytest.mark.asyncio
async def test_search_by_name_upstream_failure_is_empty_envelope():
    client = MockOpenFoodFactsClient(failures={"search": UpstreamUnavailable("boom", status_code=500)})
    service = CatalogService(client)

    envelope = await service.search_by_name("nutella", page=2, page_size=10)

    assert envelope.items == []
    assert (envelope.total_count, envelope.page, envelope.page_size, envelope.page_count) == (0, 2, 10, 0)


@pytest.mark.asyncio
@pytest.mark.parametrize("page, page_size", [(0, 24), (-1, 24), (1, 0), (1, 101)])
async def test_page_arguments_are_validated(catalog_service, mock_client, page, page_size):
    with pytest.raises(InvalidRequest):
        await catalog_service.popular(page, page_size)

    assert mock_client.calls == []


@pytest.mark.asyncio
async def test_default_page_size_applies(catalog_service, mock_client):
    await catalog_service.popular()

    assert mock_client.calls_to("popular") == [(1, 24)]


@pytest.mark.asyncio
async def test_lookup_barcode(catalog_service):
    product = await catalog_service.lookup_barcode(" 3017620422003 ")

    assert product.code == "3017620422003"
    assert product.display_name == "Nutella"
    assert product.nutriscore_grade == "e"
    assert product.nutriments.energy_kcal_100g == 539


@pytest.mark.asyncio
async def test_lookup_unknown_barcode_is_none(catalog_service):
    assert await catalog_service.lookup_barcode("0000000000000") is None


@pytest.mark.asyncio
async def test_lookup_barcode_requires_code(catalog_service, mock_client):
    with pytest.raises(InvalidRequest):
        await catalog_service.lookup_barcode("")

    assert mock_client.calls == []


@pytest.mark.asyncio
async def test_lookup_barcode_upstream_404_is_none():
    client = MockOpenFoodFactsClient(failures={"get_product": UpstreamUnavailable("gone", status_code=404)})

    assert await CatalogService(client).lookup_barcode("123") is None


@pytest.mark.asyncio
async def test_lookup_barcode_propagates_other_upstream_errors():
    client = MockOpenFoodFactsClient(failures={"get_product": UpstreamTimeout("slow")})

    with pytest.raises(UpstreamTimeout):
        await CatalogService(client).lookup_barcode("123")


@pytest.mark.asyncio
async def test_by_category_uses_slug_listing_and_paginates_locally():
    products = [make_product_data(str(i), f"Cereal {i}", categories_tags=["en:breakfast-cereals"]) for i in range(30)]
    client = MockOpenFoodFactsClient(products=products)
    service = CatalogService(client)

    first = await service.by_category("Breakfast Cereals", page=1, page_size=24)
    second = await service.by_category("Breakfast Cereals", page=2, page_size=24)

    assert client.calls_to("get_category") == [("breakfast-cereals",), ("breakfast-cereals",)]
    assert client.calls_to("search_by_category_tag") == []
    assert len(first.items) == 24
    assert len(second.items) == 6
    assert first.total_count == second.total_count == 30
    assert first.page_count == second.page_count == 2


@pytest.mark.asyncio
async def test_by_category_listing_serves_exact_tag_matches(catalog_service, mock_client):
    envelope = await catalog_service.by_category("Biscuits", page=1, page_size=24)

    assert mock_client.calls_to("get_category") == [("biscuits",)]
    assert mock_client.calls_to("search_by_category_tag") == []
    assert {p.code for p in envelope.items} == {"7622210449283", "3175680011480"}


@pytest.mark.asyncio
async def test_by_category_fallback_matches_direct_tag_search_on_zero_items():
    client = MockOpenFoodFactsClient()
    service = CatalogService(client)

    # No product is tagged "en:chocolate"; the tag search matches on text
    envelope = await service.by_category(" Chocolate ", page=1, page_size=2)
    direct = await service._category_search("Chocolate", 1, 2)

    assert client.calls_to("get_category") == [("chocolate",)]
    assert client.calls_to("search_by_category_tag")[0] == ("Chocolate", 1, 2)
    assert envelope == direct
    assert envelope.total_count == 3
    assert envelope.page_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [UpstreamTimeout("slow"), UpstreamUnavailable("down", status_code=502)])
async def test_by_category_falls_back_when_listing_fails(error):
    client = MockOpenFoodFactsClient(failures={"get_category": error})
    service = CatalogService(client)

    envelope = await service.by_category("Beverages", page=1, page_size=24)

    assert client.calls_to("search_by_category_tag") == [("Beverages", 1, 24)]
    # The tag search also matches "Plant-based foods and beverages"
    assert {p.code for p in envelope.items} == {"5449000000996", "3274080005003", "0737628064502"}


@pytest.mark.asyncio
async def test_by_category_both_phases_failing_is_empty_envelope():
    client = MockOpenFoodFactsClient(
        failures={"get_category": UpstreamTimeout("slow"), "search_by_category_tag": UpstreamTimeout("slow")}
    )

    envelope = await CatalogService(client).by_category("Beverages", page=3, page_size=12)

    assert envelope.items == []
    assert (envelope.page, envelope.page_size, envelope.page_count) == (3, 12, 0)


@pytest.mark.asyncio
async def test_by_category_requires_label(catalog_service):
    with pytest.raises(InvalidRequest):
        await catalog_service.by_category("  ")


@pytest.mark.asyncio
async def test_popular_orders_by_scans(catalog_service):
    envelope = await catalog_service.popular(page=1, page_size=3)

    assert [p.display_name for p in envelope.items] == ["Nutella", "Coca-Cola", "Eau de source"]
    assert envelope.total_count == 8
    assert envelope.page_count == 3


@pytest.mark.asyncio
async def test_categories_are_display_names_with_limit(mock_client):
    service = CatalogService(mock_client, categories_limit=3)

    names = await service.categories()

    assert names == ["Snacks", "Sweet snacks", "Beverages"]


@pytest.mark.asyncio
async def test_categories_propagate_upstream_errors():
    client = MockOpenFoodFactsClient(failures={"list_categories": UpstreamUnavailable("down", status_code=500)})

    with pytest.raises(UpstreamUnavailable):
        await CatalogService(client).categories()
