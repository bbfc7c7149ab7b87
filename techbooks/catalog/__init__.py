"""
Catalogue search package.

Wraps the Google Books volumes API behind ``BookSearchService``; the
route lives in ``router`` and is mounted at ``/api/technical-books``.
"""
