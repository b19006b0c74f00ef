import logging

from food_explorer.integrations.policy.response_wrappers import (
    extract_products,
    normalize_category_names,
    normalize_page,
    normalize_product_lookup,
    paginate_locally,
)
from food_explorer.integrations.contracts.products import Product


def _items(n, start=0):
    return [{"code": str(start + i), "product_name": f"Item {start + i}"} for i in range(n)]


def test_normalize_page_recomputes_page_count_from_total():
    # Upstream search puts the number of products on this page under page_count
    raw = {"count": 50, "page": 2, "page_size": 24, "page_count": 24, "products": _items(24)}

    envelope = normalize_page(raw, fallback_page=2, fallback_page_size=24)

    assert envelope.total_count == 50
    assert envelope.page == 2
    assert envelope.page_size == 24
    assert envelope.page_count == 3
    assert len(envelope.items) == 24


def test_normalize_page_accepts_numeric_strings():
    raw = {"count": "50", "page": "1", "page_size": "24", "products": _items(2)}

    envelope = normalize_page(raw, fallback_page=1, fallback_page_size=24)

    assert (envelope.total_count, envelope.page, envelope.page_size, envelope.page_count) == (50, 1, 24, 3)


def test_normalize_page_falls_back_to_item_count_and_request():
    envelope = normalize_page({"products": _items(3)}, fallback_page=1, fallback_page_size=24)

    assert envelope.total_count == 3
    assert envelope.page == 1
    assert envelope.page_size == 24
    assert envelope.page_count == 1


def test_normalize_page_past_the_end_keeps_page_count():
    envelope = normalize_page({"count": 50, "page": 4, "page_size": 24, "products": []},
                              fallback_page=4, fallback_page_size=24)

    assert envelope.items == []
    assert envelope.page == 4
    assert envelope.page_count == 3


def test_normalize_page_of_garbage_is_empty():
    envelope = normalize_page("not json at all", fallback_page=2, fallback_page_size=10)

    assert envelope.items == []
    assert envelope.total_count == 0
    assert envelope.page == 2
    assert envelope.page_count == 0


def test_normalize_page_uses_upstream_page_count_without_page_size():
    envelope = normalize_page({"count": 9, "page_size": 0, "page_count": 2, "products": _items(1)},
                              fallback_page=1, fallback_page_size=0)

    assert envelope.page_count == 2


def test_extract_products_handles_every_listing_shape():
    assert len(extract_products({"products": _items(2)})) == 2
    assert len(extract_products(_items(3))) == 3
    assert len(extract_products({"tags": [{"products": _items(4)}]})) == 4
    assert len(extract_products({"categories": [{"name": "x"}, {"products": _items(1)}]})) == 1
    assert extract_products({"products": []}) == []
    assert extract_products(None) == []


def test_extract_products_skips_unparseable_items(caplog):
    raw = {"products": [{"code": "1"}, {"product_name": "no code"}, "junk", {"code": "  "}, {"code": 42}]}

    with caplog.at_level(logging.WARNING):
        products = extract_products(raw)

    assert [p.code for p in products] == ["1", "42"]
    assert "Skipping unparseable product" in caplog.text


def test_paginate_locally_slices_and_reports_totals():
    products = [Product.from_api(d) for d in _items(30)]

    first = paginate_locally(products, page=1, page_size=24)
    second = paginate_locally(products, page=2, page_size=24)
    past_end = paginate_locally(products, page=3, page_size=24)

    assert [p.code for p in first.items] == [str(i) for i in range(24)]
    assert [p.code for p in second.items] == [str(i) for i in range(24, 30)]
    assert past_end.items == []
    assert {e.page_count for e in (first, second, past_end)} == {2}
    assert {e.total_count for e in (first, second, past_end)} == {30}


def test_normalize_product_lookup_requires_found_status():
    product = {"code": "3017620422003", "product_name": "Nutella"}

    assert normalize_product_lookup({"status": 1, "product": product}).product_name == "Nutella"
    assert normalize_product_lookup({"status": 0, "product": product}) is None
    assert normalize_product_lookup({"status": 1}) is None
    assert normalize_product_lookup({"status": 1, "product": {}}) is None
    assert normalize_product_lookup([]) is None


def test_normalize_product_lookup_takes_code_from_envelope():
    raw = {"code": "20724696", "status": 1, "product": {"product_name": "Yogurt"}}

    assert normalize_product_lookup(raw).code == "20724696"


def test_normalize_category_names_prefers_name_then_id_and_limits():
    raw = {
        "tags": [
            {"id": "en:beverages", "name": "Beverages"},
            {"id": "en:snacks", "name": ""},
            {"products": 4},
            "junk",
            {"id": "en:dairies", "name": "Dairies"},
        ]
    }

    assert normalize_category_names(raw, limit=50) == ["Beverages", "en:snacks", "Dairies"]
    assert normalize_category_names(raw, limit=2) == ["Beverages", "en:snacks"]
    assert normalize_category_names({}, limit=50) == []


def test_normalize_page_ignores_infinite_counts():
    # json decodes 1e999 to inf
    raw = {"count": float("inf"), "page": float("inf"), "page_size": float("nan"), "products": _items(2)}

    envelope = normalize_page(raw, fallback_page=1, fallback_page_size=24)

    assert (envelope.total_count, envelope.page, envelope.page_size, envelope.page_count) == (2, 1, 24, 1)
