"""
Catalog endpoints, mirroring the upstream operations 1:1.

Listing endpoints (search, category, popular) answer 200 with an empty envelope
on any failure; only malformed requests get a 400. Barcode lookups and the
category enumeration report upstream failures with 502/504.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from food_explorer.api.dependencies import get_catalog_service, get_error_handler
from food_explorer.catalog.service import CatalogService
from food_explorer.error_handler import ErrorHandler
from food_explorer.integrations.contracts.products import PageEnvelope
from food_explorer.integrations.errors import InvalidRequest, NotFound, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter()

CATEGORIES_CACHE_CONTROL = "public, max-age=86400"
PRODUCT_CACHE_CONTROL = "public, max-age=3600"
LISTING_CACHE_CONTROL = "public, max-age=3600"
NO_STORE = "no-store"


def _listing_response(envelope: PageEnvelope) -> JSONResponse:
    cache_control = LISTING_CACHE_CONTROL if envelope.items else NO_STORE
    return JSONResponse(content=envelope.to_payload(), headers={"Cache-Control": cache_control})


def _empty_listing(service: CatalogService, page: int, page_size: Optional[int], status_code: int = 200) -> JSONResponse:
    envelope = PageEnvelope.empty(page, page_size or service.default_page_size)
    return JSONResponse(content=envelope.to_payload(), status_code=status_code, headers={"Cache-Control": NO_STORE})


@router.get("/categories", tags=["Categories"])
async def list_categories(
    service: CatalogService = Depends(get_catalog_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    """Top category display names."""
    try:
        names = await service.categories()
    except UpstreamError as e:
        handled = errors.handle_exception(e, context={"endpoint": "categories"})
        return JSONResponse(content=[], status_code=handled["status_code"], headers={"Cache-Control": NO_STORE})
    return JSONResponse(content=names, headers={"Cache-Control": CATEGORIES_CACHE_CONTROL})


@router.get("/products/barcode", tags=["Products"])
async def product_by_barcode(
    code: str = Query(default=""),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Single product by barcode.
    - 400 when code is missing, 404 when the upstream has no such product
    """
    product = await service.lookup_barcode(code)
    if product is None:
        raise NotFound(f"No product found for barcode {code.strip()}")
    return JSONResponse(
        content=product.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": PRODUCT_CACHE_CONTROL},
    )


@router.get("/products/search", tags=["Products"])
async def search_products(
    q: str = Query(default=""),
    page: int = Query(default=1),
    page_size: Optional[int] = Query(default=None, alias="pageSize"),
    service: CatalogService = Depends(get_catalog_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    try:
        envelope = await service.search_by_name(q, page, page_size)
    except InvalidRequest as e:
        errors.handle_exception(e, context={"endpoint": "search", "q": q})
        return _empty_listing(service, page, page_size, status_code=400)
    except Exception as e:
        errors.handle_exception(e, context={"endpoint": "search", "q": q})
        return _empty_listing(service, page, page_size)
    return _listing_response(envelope)


@router.get("/products/category", tags=["Products"])
async def products_by_category(
    category: str = Query(default=""),
    page: int = Query(default=1),
    page_size: Optional[int] = Query(default=None, alias="pageSize"),
    service: CatalogService = Depends(get_catalog_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    try:
        envelope = await service.by_category(category, page, page_size)
    except InvalidRequest as e:
        errors.handle_exception(e, context={"endpoint": "category", "category": category})
        return _empty_listing(service, page, page_size, status_code=400)
    except Exception as e:
        errors.handle_exception(e, context={"endpoint": "category", "category": category})
        return _empty_listing(service, page, page_size)
    return _listing_response(envelope)


@router.get("/products/popular", tags=["Products"])
async def popular_products(
    page: int = Query(default=1),
    page_size: Optional[int] = Query(default=None, alias="pageSize"),
    service: CatalogService = Depends(get_catalog_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    try:
        envelope = await service.popular(page, page_size)
    except InvalidRequest as e:
        errors.handle_exception(e, context={"endpoint": "popular"})
        return _empty_listing(service, page, page_size, status_code=400)
    except Exception as e:
        errors.handle_exception(e, context={"endpoint": "popular"})
        return _empty_listing(service, page, page_size)
    return _listing_response(envelope)
