"""
Persistence contract for the reading queue.

``QueueRepository`` is the port the service depends on.  Any backend
must honour the same ordering rules:

* ``list`` sorts by ``added_at`` ascending, then ``id`` ascending.
* ``find_oldest_stacked`` breaks ``added_at`` ties with the smallest id.
* ``find_newest_stacked`` breaks ``added_at`` ties with the largest id.

Every repository owns a single re-entrant lock for the whole
collection.  Each call takes it, and ``transaction()`` lets a caller
hold it across several calls so that check-then-upsert sequences
cannot interleave.

``InMemoryQueueRepository`` is the reference implementation used by the
tests.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import NoStackedItemsError, NotFoundError
from .schemas import QueueItem, Status


def sort_items(items: Iterable[QueueItem]) -> List[QueueItem]:
    return sorted(items, key=QueueItem.sort_key)


def oldest_stacked(items: Iterable[QueueItem]) -> QueueItem:
    stacked = [it for it in items if it.status == Status.STACKED]
    if not stacked:
        raise NoStackedItemsError()
    return min(stacked, key=QueueItem.sort_key)


def newest_stacked(items: Iterable[QueueItem]) -> QueueItem:
    stacked = [it for it in items if it.status == Status.STACKED]
    if not stacked:
        raise NoStackedItemsError()
    return max(stacked, key=QueueItem.sort_key)


class QueueRepository(ABC):
    """Storage port for queue items, addressed by item id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the collection lock for the duration of the block."""
        with self._lock:
            yield

    @abstractmethod
    def get(self, item_id: str) -> QueueItem:
        """Return the item or raise ``NotFoundError``."""

    @abstractmethod
    def upsert(self, item: QueueItem) -> None:
        """Insert ``item`` or fully replace the item with the same id."""

    @abstractmethod
    def list(self, status: Optional[Status] = None) -> List[QueueItem]:
        """Return all items, or those with ``status``, in queue order."""

    @abstractmethod
    def find_oldest_stacked(self) -> QueueItem:
        """Return the next stacked item or raise ``NoStackedItemsError``."""

    @abstractmethod
    def find_newest_stacked(self) -> QueueItem:
        """Return the last stacked item or raise ``NoStackedItemsError``."""


class InMemoryQueueRepository(QueueRepository):
    """Dict-backed repository.  Items are copied on the way in and out."""

    def __init__(self) -> None:
        super().__init__()
        self._items: Dict[str, QueueItem] = {}

    def get(self, item_id: str) -> QueueItem:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise NotFoundError()
            return item.model_copy(deep=True)

    def upsert(self, item: QueueItem) -> None:
        with self._lock:
            self._items[item.id] = item.model_copy(deep=True)

    def list(self, status: Optional[Status] = None) -> List[QueueItem]:
        with self._lock:
            items = [
                it.model_copy(deep=True)
                for it in self._items.values()
                if status is None or it.status == status
            ]
        return sort_items(items)

    def find_oldest_stacked(self) -> QueueItem:
        with self._lock:
            return oldest_stacked(self._items.values()).model_copy(deep=True)

    def find_newest_stacked(self) -> QueueItem:
        with self._lock:
            return newest_stacked(self._items.values()).model_copy(deep=True)
