"""
Search request and response models for the catalogue.

``SearchParams`` is what the HTTP layer hands to the search service;
``SearchResult`` is what comes back (``totalItems`` as reported by the
upstream catalogue plus the mapped page of books).
"""

from typing import List

from pydantic import Field

from ..models import Book, CamelModel


class SearchParams(CamelModel):
    query: str = ""
    start_index: int = 0
    max_results: int = 10
    order_by: str = "relevance"
    lang: str = ""


class SearchResult(CamelModel):
    total_items: int = 0
    items: List[Book] = Field(default_factory=list)
