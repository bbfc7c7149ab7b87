"""
Google Books integration for the catalogue.

``GoogleBooksClient.search()`` queries the public volumes endpoint and
maps each volume into the ``Book`` schema.  Only the Python standard
library is used for HTTP.  Unlike a best-effort lookup, a failed
request raises ``CatalogError`` so the route can answer 502 instead of
pretending there were no results.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_BOOKS_BASE_URL
from ..models import Book
from .errors import CatalogError
from .schemas import SearchParams, SearchResult


logger = logging.getLogger(__name__)

# The volumes endpoint never returns more than this per page here.
MAX_RESULTS = 10


def _http_get_json(url: str, timeout: float) -> Dict[str, Any]:
    """Perform an HTTP GET and return the decoded JSON body.

    Non-2xx responses, network errors and undecodable bodies raise
    ``CatalogError``.  Up to 4 KiB of an error body is kept in the
    message.
    """
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8", errors="ignore")
    except urllib.error.HTTPError as exc:
        snippet = exc.read(4 << 10).decode("utf-8", errors="ignore").strip()
        logger.warning("Google Books returned status %s: %s", exc.code, snippet)
        raise CatalogError(f"googlebooks upstream status {exc.code}: {snippet}") from exc
    except (urllib.error.URLError, OSError) as exc:
        logger.error("Error fetching %s: %s", _redact(url), exc)
        raise CatalogError(f"googlebooks request failed: {exc}") from exc
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise CatalogError("googlebooks returned invalid JSON") from exc
    if not isinstance(data, dict):
        raise CatalogError("googlebooks returned an unexpected document")
    return data


def _redact(url: str) -> str:
    """Hide the API key when logging a request URL."""
    parts = urllib.parse.urlsplit(url)
    query = [
        (k, "***" if k == "key" else v)
        for k, v in urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(query)))


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _volume_to_book(volume: Dict[str, Any]) -> Book:
    info = volume.get("volumeInfo") or {}
    images = info.get("imageLinks") or {}
    page_count = info.get("pageCount")
    return Book(
        id=str(volume.get("id") or ""),
        title=info.get("title") or "",
        authors=_string_list(info.get("authors")),
        published_date=info.get("publishedDate") or "",
        description=info.get("description") or "",
        categories=_string_list(info.get("categories")),
        page_count=page_count if isinstance(page_count, int) else 0,
        thumbnail=images.get("thumbnail") or "",
        info_link=info.get("infoLink") or "",
    )


class GoogleBooksClient:
    """Client for the Google Books volumes API."""

    def __init__(self, base_url: str = "", api_key: str = "", timeout: float = 5.0):
        self.base_url = base_url or DEFAULT_BOOKS_BASE_URL
        self.api_key = api_key
        self.timeout = timeout

    def build_url(self, params: SearchParams) -> str:
        """Compose the request URL for ``params``.

        ``startIndex`` is always sent, including 0.  ``maxResults`` falls
        back to 10 when not positive and never exceeds 10.  The
        ``fields`` parameter is not used because it interferes with
        ``maxResults``.
        """
        query: Dict[str, Any] = {
            "q": params.query.strip(),
            "printType": "books",
        }
        if params.lang and params.lang != "all":
            query["langRestrict"] = params.lang
        query["orderBy"] = "newest" if params.order_by == "newest" else "relevance"
        query["startIndex"] = params.start_index
        max_results = params.max_results if params.max_results > 0 else MAX_RESULTS
        query["maxResults"] = min(max_results, MAX_RESULTS)
        if self.api_key:
            query["key"] = self.api_key
        return f"{self.base_url}?{urllib.parse.urlencode(query)}"

    def search(self, params: SearchParams) -> SearchResult:
        data = _http_get_json(self.build_url(params), self.timeout)
        volumes = data.get("items") or []
        books = [_volume_to_book(v) for v in volumes if isinstance(v, dict)]
        total: Optional[int] = data.get("totalItems")
        return SearchResult(
            total_items=total if isinstance(total, int) else 0,
            items=books,
        )
