from abc import ABC, abstractmethod
from typing import Any


# ---------------------------------------------------------------------------
# Upstream client interface
# ---------------------------------------------------------------------------

class ProductDatabaseClient(ABC):
    """
    Raw access to the upstream product database.

    Every method returns the decoded JSON body unchanged; shaping into
    contracts happens in integrations.policy.response_wrappers. Failures are
    raised as integrations.errors.UpstreamTimeout / UpstreamUnavailable.
    """

    @abstractmethod
    async def search(self, terms: str, page: int, page_size: int) -> Any:
        ...

    @abstractmethod
    async def get_product(self, code: str) -> Any:
        ...

    @abstractmethod
    async def get_category(self, slug: str) -> Any:
        ...

    @abstractmethod
    async def search_by_category_tag(self, label: str, page: int, page_size: int) -> Any:
        ...

    @abstractmethod
    async def popular(self, page: int, page_size: int) -> Any:
        ...

    @abstractmethod
    async def list_categories(self) -> Any:
        ...
