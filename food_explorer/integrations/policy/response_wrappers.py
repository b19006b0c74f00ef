from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from food_explorer.integrations.contracts.products import PageEnvelope, Product

logger = logging.getLogger(__name__)

# Keys under which the category endpoints nest their product lists
_WRAPPER_KEYS = ("tags", "categories")


def normalize_page(raw: Any, *, fallback_page: int, fallback_page_size: int) -> PageEnvelope:
    """Map any upstream listing shape onto the fixed pagination envelope."""
    products = extract_products(raw)
    meta: Dict[str, Any] = raw if isinstance(raw, dict) else {}

    total_count = _coerce_count(meta.get("count"), default=len(products))
    page = _coerce_count(meta.get("page"), default=fallback_page)
    if page < 1:
        page = max(fallback_page, 1)
    page_size = _coerce_count(meta.get("page_size"), default=fallback_page_size)

    return PageEnvelope(
        items=products,
        total_count=total_count,
        page=page,
        page_size=page_size,
        page_count=_page_count(total_count, page_size, meta.get("page_count")),
    )


def paginate_locally(products: List[Product], *, page: int, page_size: int) -> PageEnvelope:
    """Slice a complete product list into one page; out-of-range pages come back empty."""
    page = max(page, 1)
    total_count = len(products)
    if page_size > 0:
        start = (page - 1) * page_size
        items = products[start:start + page_size]
    else:
        items = []
    return PageEnvelope(
        items=items,
        total_count=total_count,
        page=page,
        page_size=max(page_size, 0),
        page_count=_page_count(total_count, page_size, None),
    )


def extract_products(raw: Any) -> List[Product]:
    return _parse_products(_extract_product_list(raw))


def normalize_product_lookup(raw: Any) -> Optional[Product]:
    """Single-item lookup: a product only when status == 1 and a payload is present."""
    if not isinstance(raw, dict):
        return None
    if _coerce_count(raw.get("status"), default=0) != 1:
        return None
    product = raw.get("product")
    if not isinstance(product, dict) or not product:
        return None

    data = dict(product)
    if not data.get("code") and raw.get("code"):
        data["code"] = raw["code"]
    try:
        return Product.from_api(data)
    except ValidationError as exc:
        logger.warning("Discarding unparseable product payload for code=%s: %s", raw.get("code"), exc)
        return None


def normalize_category_names(raw: Any, *, limit: int) -> List[str]:
    """Display names of the category enumeration, falling back to the tag id."""
    tags = raw.get("tags") if isinstance(raw, dict) else None
    if not isinstance(tags, list):
        return []

    names: List[str] = []
    for tag in tags:
        if not isinstance(tag, dict):
            continue
        name = _first_non_empty(tag, "name", "id")
        if name is None:
            continue
        names.append(str(name))
        if len(names) >= limit:
            break
    return names


def _extract_product_list(raw: Any) -> List[Any]:
    if isinstance(raw, dict):
        products = raw.get("products")
        if isinstance(products, list) and products:
            return products
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        for key in _WRAPPER_KEYS:
            wrappers = raw.get(key)
            if not isinstance(wrappers, list):
                continue
            for wrapper in wrappers:
                if not isinstance(wrapper, dict):
                    continue
                nested = wrapper.get("products")
                if isinstance(nested, list) and nested:
                    return nested
    return []


def _parse_products(items: List[Any]) -> List[Product]:
    products: List[Product] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            products.append(Product.from_api(item))
        except ValidationError as exc:
            logger.warning("Skipping unparseable product (code=%s): %s", item.get("code"), exc)
    return products


def _page_count(total_count: int, page_size: int, raw_page_count: Any) -> int:
    # Upstream search reports the number of products on the current page under
    # "page_count", so it is only trusted when page_size is unknown.
    if page_size > 0:
        return math.ceil(total_count / page_size)
    return _coerce_count(raw_page_count, default=0)


def _coerce_count(value: Any, *, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number >= 0 else default


def _first_non_empty(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
