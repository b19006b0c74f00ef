"""Error handling helpers for the explorer HTTP boundary."""
from typing import Any, Dict
import logging

from food_explorer.integrations.errors import InvalidRequest, NotFound, UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (InvalidRequest, 400),
    (NotFound, 404),
    (UpstreamTimeout, 504),
    (UpstreamUnavailable, 502),
)


class ErrorHandler:
    def status_for(self, exc: Exception) -> int:
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                return status_code
        return 500

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        status_code = self.status_for(exc)
        if status_code == 500:
            logger.error("Unhandled exception in explorer API: %s", exc, exc_info=True)
            message = "An internal error occurred while processing your request. Please try again later."
        elif status_code >= 500:
            logger.warning("Upstream failure (%s): %s", status_code, exc)
            message = str(exc)
        else:
            logger.info("Request rejected (%s): %s", status_code, exc)
            message = str(exc)
        return {
            "status_code": status_code,
            "error": message,
            "metadata": {"error_type": type(exc).__name__, "context": context or {}},
        }
