from fastapi import Request

from food_explorer.catalog.service import CatalogService
from food_explorer.error_handler import ErrorHandler

_error_handler = ErrorHandler()


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_error_handler() -> ErrorHandler:
    return _error_handler
