"""Favourite books: a flat, keyed list with no lifecycle."""

from .schemas import FavoriteItem  # noqa: F401
from .service import FavoritesService  # noqa: F401
