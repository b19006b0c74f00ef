"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_explorer.api.dependencies import get_error_handler
from food_explorer.api.products_router import router as products_router
from food_explorer.catalog.service import CatalogService
from food_explorer.integrations.clients.mocks.openfoodfacts import MockOpenFoodFactsClient
from food_explorer.integrations.clients.real_http.openfoodfacts import OpenFoodFactsClient
from food_explorer.integrations.errors import CatalogError, NotFound
from food_explorer.utils.config_loader import ExplorerConfig, load_explorer_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def _should_use_real_integrations() -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"mock", "test"}:
        return False
    return True


def build_response_cache(config: ExplorerConfig):
    """Real Redis when REDIS_URL is set, else the in-memory cache."""
    if os.getenv("REDIS_URL"):
        from food_explorer.database.redis_real import RedisResponseCache

        return RedisResponseCache(url=os.environ["REDIS_URL"])

    from food_explorer.database.redis import ResponseCache

    return ResponseCache(max_entries=config.cache.max_entries)


def build_catalog_service(config: ExplorerConfig, cache) -> CatalogService:
    if _should_use_real_integrations():
        client = OpenFoodFactsClient(config.upstream, cache=cache, cache_config=config.cache)
        logger.info("Using Open Food Facts at %s", client.base_url)
    else:
        client = MockOpenFoodFactsClient()
        logger.info("Using mock product database (INTEGRATIONS_MODE=%s)", os.getenv("INTEGRATIONS_MODE"))

    return CatalogService(
        client,
        default_page_size=config.pagination.default_page_size,
        max_page_size=config.pagination.max_page_size,
        categories_limit=config.categories_limit,
    )


def create_app(
    catalog_service: Optional[CatalogService] = None,
    config: Optional[ExplorerConfig] = None,
    cache=None,
) -> FastAPI:
    config = config or load_explorer_config()
    if cache is None:
        cache = build_response_cache(config)
    if catalog_service is None:
        catalog_service = build_catalog_service(config, cache)

    app = FastAPI(
        title="Food Product Explorer API",
        description="Search, browse and inspect Open Food Facts products through a stable pagination envelope",
        version=API_VERSION,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.response_cache = cache
    app.state.catalog_service = catalog_service

    app.include_router(products_router, prefix="/api")

    _register_exception_handlers(app)
    _register_health_endpoints(app)
    return app


# ============================================================================
# ERROR HANDLING
# ============================================================================

def _register_exception_handlers(app: FastAPI) -> None:
    errors = get_error_handler()

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        handled = errors.handle_exception(exc, context={"path": request.url.path})
        if isinstance(exc, NotFound):
            return JSONResponse(content=None, status_code=handled["status_code"])
        return JSONResponse(content={"error": handled["error"]}, status_code=handled["status_code"])

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            content={"error": "Invalid request parameters", "detail": jsonable_encoder(exc.errors())},
            status_code=400,
        )


# ============================================================================
# ENDPOINTS
# ============================================================================

def _register_health_endpoints(app: FastAPI) -> None:
    @app.get("/", tags=["Health"])
    async def root():
        """Health check endpoint."""
        return {"service": "Food Product Explorer API", "status": "healthy", "version": API_VERSION, "timestamp": datetime.now().isoformat()}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check (upstream client, response cache)."""
        service = app.state.catalog_service
        return {
            "status": "healthy",
            "upstream_client": type(service.client).__name__,
            "cache": await app.state.response_cache.ping(),
            "timestamp": datetime.now().isoformat(),
        }


app = create_app()
