from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..models import Book
from .errors import AlreadyExistsError, InvalidInputError, NotFoundError
from .repository import FavoritesRepository
from .schemas import FavoriteItem


logger = logging.getLogger(__name__)


class FavoritesService:
    """Add, list and remove favourite books.  No state machine here."""

    def __init__(self, repo: FavoritesRepository, now: Optional[Callable[[], datetime]] = None):
        self.repo = repo
        self._now = now or (lambda: datetime.now(timezone.utc))

    def add(self, book: Book) -> FavoriteItem:
        if not book.id:
            raise InvalidInputError("book id is required")
        with self.repo.transaction():
            try:
                self.repo.get(book.id)
            except NotFoundError:
                pass
            else:
                raise AlreadyExistsError()
            item = FavoriteItem(
                id=book.id,
                book=book,
                added_at=self._now().astimezone(timezone.utc),
            )
            self.repo.upsert(item)
        logger.info("Added favorite %s", item.id)
        return item

    def list(self) -> List[FavoriteItem]:
        return self.repo.list()

    def delete(self, book_id: str) -> None:
        if not book_id:
            raise InvalidInputError("book id is required")
        with self.repo.transaction():
            self.repo.get(book_id)
            self.repo.delete(book_id)
        logger.info("Removed favorite %s", book_id)
