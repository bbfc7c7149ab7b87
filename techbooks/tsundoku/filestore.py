"""File-backed reading queue repository."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from ..storage import JsonFileStore, StorageError
from .errors import NotFoundError
from .repository import QueueRepository, newest_stacked, oldest_stacked, sort_items
from .schemas import QueueItem, Status


logger = logging.getLogger(__name__)


class FileQueueRepository(QueueRepository):
    """Stores queue items in a JSON file.

    The whole file is read on every call and rewritten on every
    ``upsert``, which is plenty for a personal reading list.  The
    repository lock and the store lock are the same object, so holding
    ``transaction()`` also serialises the file access.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self._store = JsonFileStore(path)
        self._lock = self._store.lock

    def _load(self) -> Dict[str, QueueItem]:
        records = self._store.load()
        try:
            return {key: QueueItem.model_validate(rec) for key, rec in records.items()}
        except ValidationError as exc:
            raise StorageError(f"corrupt tsundoku record in {self._store.path}: {exc}") from exc

    def get(self, item_id: str) -> QueueItem:
        with self._lock:
            item = self._load().get(item_id)
        if item is None:
            raise NotFoundError()
        return item

    def upsert(self, item: QueueItem) -> None:
        with self._lock:
            records = self._store.load()
            records[item.id] = item.to_record()
            self._store.persist(records)
        logger.debug("Stored tsundoku item %s (%s)", item.id, item.status.value)

    def list(self, status: Optional[Status] = None) -> List[QueueItem]:
        with self._lock:
            items = self._load().values()
        return sort_items(it for it in items if status is None or it.status == status)

    def find_oldest_stacked(self) -> QueueItem:
        with self._lock:
            return oldest_stacked(self._load().values())

    def find_newest_stacked(self) -> QueueItem:
        with self._lock:
            return newest_stacked(self._load().values())
