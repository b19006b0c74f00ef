"""
Explorer configuration loader (upstream, caching, pagination).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "explorer_config.yml"


class UpstreamConfig(BaseModel):
    """Open Food Facts connection settings"""

    base_url: str = "https://world.openfoodfacts.org"
    user_agent: str = "FoodProductExplorer/1.0 (+https://world.openfoodfacts.org)"
    timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)
    lookup_timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)


class CacheConfig(BaseModel):
    """TTLs mirror the Cache-Control hints sent to clients"""

    enabled: bool = True
    categories_ttl: int = Field(default=86400, ge=0)
    product_ttl: int = Field(default=3600, ge=0)
    listing_ttl: int = Field(default=3600, ge=0)
    max_entries: int = Field(default=1024, ge=1)


class PaginationConfig(BaseModel):
    default_page_size: int = Field(default=24, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=1000)


class ExplorerConfig(BaseModel):
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    categories_limit: int = Field(default=50, ge=1, le=1000)


def load_explorer_config(config_path: Optional[Path] = None) -> ExplorerConfig:
    """
    Load and validate explorer configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/explorer_config.yml;
            when the default file is absent the built-in defaults are used.

    Returns:
        Validated ExplorerConfig object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        if not config_path.exists():
            logger.info("No config file at %s, using defaults", config_path)
            return _apply_env_overrides(ExplorerConfig())

    if not config_path.exists():
        raise FileNotFoundError(f"Explorer config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = ExplorerConfig(**data)
        logger.info("Successfully loaded explorer config from %s", config_path)
    except ValidationError as e:
        logger.error("Explorer config validation failed: %s", e)
        raise

    return _apply_env_overrides(cfg)


def _apply_env_overrides(cfg: ExplorerConfig) -> ExplorerConfig:
    base_url = os.getenv("OFF_BASE_URL", "").strip()
    if base_url:
        cfg.upstream.base_url = base_url
    return cfg
