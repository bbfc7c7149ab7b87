from __future__ import annotations

import logging

from .googlebooks_service import GoogleBooksClient
from .schemas import SearchParams, SearchResult


logger = logging.getLogger(__name__)


class BookSearchService:
    """Technical book search.  Delegates straight to the catalogue client."""

    def __init__(self, client: GoogleBooksClient):
        self.client = client

    def search(self, params: SearchParams) -> SearchResult:
        result = self.client.search(params)
        logger.info(
            "Search %r from %d returned %d of %d",
            params.query,
            params.start_index,
            len(result.items),
            result.total_items,
        )
        return result
