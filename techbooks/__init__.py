"""
Technical books backend.

Searches the Google Books catalogue and keeps two personal collections
on disk: a reading queue ("tsundoku") and a flat favourites list.
"""

__version__ = "1.0.0"
