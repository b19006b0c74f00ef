"""Pytest fixtures for catalog, orchestrator and API tests."""

import pytest

from food_explorer.catalog.service import CatalogService
from food_explorer.integrations.clients.mocks.openfoodfacts import MockOpenFoodFactsClient
from food_explorer.integrations.contracts.products import Product


def make_product_data(code, name=None, **extra):
    data = {"code": code, "product_name": name if name is not None else f"Product {code}"}
    data.update(extra)
    return data


def chocolate_catalogue(count=50):
    """`count` products that all match the name search "chocolate"."""
    return [
        make_product_data(f"{1000 + i}", f"Chocolate bar {i:02d}", categories="Snacks, Chocolates",
                          categories_tags=["en:snacks", "en:chocolates"], unique_scans_n=count - i)
        for i in range(count)
    ]


@pytest.fixture
def make_product():
    def _make(code="123", name="Test product", **extra):
        return Product.from_api(make_product_data(code, name, **extra))

    return _make


@pytest.fixture
def mock_client():
    """Mock upstream serving the built-in catalogue."""
    return MockOpenFoodFactsClient()


@pytest.fixture
def catalog_service(mock_client):
    return CatalogService(mock_client)
