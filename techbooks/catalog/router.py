"""
Route definitions for the catalogue search.

- GET /api/technical-books : search Google Books

Pages are a fixed 10 results.  ``page`` (1-indexed) is turned into a
``startIndex`` unless the client passes ``startIndex`` itself.
Malformed or out-of-range ``page``/``startIndex`` values are ignored
rather than rejected.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_search_service
from .errors import CatalogError
from .schemas import SearchParams, SearchResult
from .service import BookSearchService


logger = logging.getLogger(__name__)

PAGE_SIZE = 10

router = APIRouter(prefix="/api", tags=["catalog"])


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def start_index_for(page_raw: Optional[str], start_raw: Optional[str]) -> int:
    """Work out the zero-based start index from the query string."""
    page = _parse_int(page_raw)
    if page is None or page <= 0:
        page = 1
    if start_raw is not None and start_raw != "":
        start = _parse_int(start_raw)
        return start if start is not None and start >= 0 else 0
    return (page - 1) * PAGE_SIZE


@router.get("/technical-books", response_model=SearchResult)
def search_books(
    q: Optional[str] = Query(default=None, description="Search text"),
    page: Optional[str] = Query(default=None, description="1-indexed page"),
    start_index: Optional[str] = Query(default=None, alias="startIndex"),
    order_by: Optional[str] = Query(default=None, alias="orderBy", description="relevance or newest"),
    lang: Optional[str] = Query(default=None, description="Language restriction, or 'all'"),
    service: BookSearchService = Depends(get_search_service),
) -> SearchResult:
    if not (q or "").strip():
        raise HTTPException(status_code=400, detail="q required")

    params = SearchParams(
        query=q,
        start_index=start_index_for(page, start_index),
        max_results=PAGE_SIZE,
        order_by=order_by or "relevance",
        lang=lang or "",
    )
    try:
        return service.search(params)
    except CatalogError as exc:
        logger.warning("Search for %r failed: %s", q, exc)
        raise HTTPException(status_code=502, detail="upstream error")
