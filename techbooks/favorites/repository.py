"""
Persistence for the favourites list.

Same shape as the reading queue repositories: an abstract port, a
dict-backed implementation and a JSON file implementation, each with a
single re-entrant lock exposed through ``transaction()``.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Union

from pydantic import ValidationError

from ..storage import JsonFileStore, StorageError
from .errors import NotFoundError
from .schemas import FavoriteItem


logger = logging.getLogger(__name__)


class FavoritesRepository(ABC):
    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    @abstractmethod
    def get(self, book_id: str) -> FavoriteItem:
        """Return the favourite or raise ``NotFoundError``."""

    @abstractmethod
    def upsert(self, item: FavoriteItem) -> None:
        ...

    @abstractmethod
    def delete(self, book_id: str) -> None:
        """Remove the favourite; missing ids are ignored."""

    @abstractmethod
    def list(self) -> List[FavoriteItem]:
        """Return all favourites ordered by ``added_at`` then ``id``."""


class InMemoryFavoritesRepository(FavoritesRepository):
    def __init__(self) -> None:
        super().__init__()
        self._items: Dict[str, FavoriteItem] = {}

    def get(self, book_id: str) -> FavoriteItem:
        with self._lock:
            if book_id not in self._items:
                raise NotFoundError()
            return self._items[book_id].model_copy(deep=True)

    def upsert(self, item: FavoriteItem) -> None:
        with self._lock:
            self._items[item.id] = item.model_copy(deep=True)

    def delete(self, book_id: str) -> None:
        with self._lock:
            self._items.pop(book_id, None)

    def list(self) -> List[FavoriteItem]:
        with self._lock:
            items = [it.model_copy(deep=True) for it in self._items.values()]
        return sorted(items, key=FavoriteItem.sort_key)


class FileFavoritesRepository(FavoritesRepository):
    """Favourites stored as ``{"items": {id: record}}`` in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self._store = JsonFileStore(path)
        self._lock = self._store.lock

    def _load(self) -> Dict[str, FavoriteItem]:
        try:
            return {
                key: FavoriteItem.model_validate(rec)
                for key, rec in self._store.load().items()
            }
        except ValidationError as exc:
            raise StorageError(f"corrupt favorite record in {self._store.path}: {exc}") from exc

    def get(self, book_id: str) -> FavoriteItem:
        with self._lock:
            item = self._load().get(book_id)
        if item is None:
            raise NotFoundError()
        return item

    def upsert(self, item: FavoriteItem) -> None:
        with self._lock:
            records = self._store.load()
            records[item.id] = item.to_record()
            self._store.persist(records)

    def delete(self, book_id: str) -> None:
        with self._lock:
            records = self._store.load()
            records.pop(book_id, None)
            self._store.persist(records)
        logger.debug("Removed favorite %s", book_id)

    def list(self) -> List[FavoriteItem]:
        with self._lock:
            items = self._load().values()
        return sorted(items, key=FavoriteItem.sort_key)
