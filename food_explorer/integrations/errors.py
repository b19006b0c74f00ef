"""
Error taxonomy shared by the upstream gateway, the catalog service and the HTTP layer.

- UpstreamTimeout / UpstreamUnavailable: the upstream call did not produce usable JSON
- NotFound: a barcode lookup found no product
- InvalidRequest: a required query parameter is missing or malformed
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogError(Exception):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class UpstreamError(CatalogError):
    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.url = url
        self.status_code = status_code


class UpstreamTimeout(UpstreamError):
    pass


class UpstreamUnavailable(UpstreamError):
    pass


class NotFound(CatalogError):
    pass


class InvalidRequest(CatalogError):
    pass
