"""
Reading queue ("tsundoku") service.

Books are stacked in the order they were added and picked up one at a
time.  The rules enforced here:

* Only one item may be ``reading`` when going through ``pickup`` or
  ``start_reading``.  ``update_status`` is a manual override and
  deliberately skips that check.
* ``pickup`` takes the oldest stacked item (``added_at``, then ``id``).
* ``restack`` puts a finished book at the back of the queue, giving it
  an ``added_at`` strictly later than every stacked item even when the
  clock has not moved.
* Adding a book that is already queued fails unless it is ``done``, in
  which case its lifecycle starts over.

The service keeps no state of its own besides the clock.  Multi-step
operations run inside ``repo.transaction()``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Union

from ..models import Book
from .errors import (
    AlreadyExistsError,
    InvalidInputError,
    InvalidStatusError,
    NoStackedItemsError,
    NotFoundError,
    ReadingInProgressError,
)
from .repository import QueueRepository
from .schemas import QueueItem, Status


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

RESTACK_STEP = timedelta(milliseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QueueService:
    def __init__(self, repo: QueueRepository, now: Optional[Clock] = None):
        self.repo = repo
        self._now = now or utc_now

    def now(self) -> datetime:
        return self._now().astimezone(timezone.utc)

    def add(self, book: Book, note: str = "", priority: Optional[int] = None) -> QueueItem:
        """Stack ``book``, or restart it if it was already read."""
        if not book.id:
            raise InvalidInputError("book id is required")

        with self.repo.transaction():
            try:
                existing = self.repo.get(book.id)
            except NotFoundError:
                existing = None
            if existing is not None and existing.status != Status.DONE:
                raise AlreadyExistsError()

            now = self.now()
            item = QueueItem(
                id=book.id,
                book=book,
                note=note,
                priority=priority,
                status=Status.STACKED,
                added_at=now,
                updated_at=now,
            )
            self.repo.upsert(item)

        logger.info("%s tsundoku item %s", "Re-stacked" if existing else "Stacked", item.id)
        return item

    def list(self, status: Optional[Union[str, Status]] = None) -> List[QueueItem]:
        """Return queued items in order, optionally only those with ``status``.

        ``None`` and the empty string both mean "no filter".
        """
        parsed = Status.parse(status) if status else None
        return self.repo.list(parsed)

    def pickup(self) -> QueueItem:
        """Start reading the oldest stacked item."""
        with self.repo.transaction():
            self._ensure_nobody_reading()
            item = self.repo.find_oldest_stacked()
            item = self._promote(item)
        logger.info("Picked up tsundoku item %s", item.id)
        return item

    def start_reading(self, item_id: str) -> QueueItem:
        """Start reading a specific stacked item."""
        with self.repo.transaction():
            self._ensure_nobody_reading()
            item = self.repo.get(item_id)
            if item.status != Status.STACKED:
                raise InvalidStatusError(
                    f"item {item_id} is {item.status.value}, not stacked"
                )
            item = self._promote(item)
        logger.info("Started reading tsundoku item %s", item.id)
        return item

    def update_status(self, item_id: str, status: Union[str, Status]) -> QueueItem:
        """Force ``status`` onto an item, adjusting its timestamps."""
        new_status = Status.parse(status)

        with self.repo.transaction():
            item = self.repo.get(item_id)
            now = self.now()
            changes = {"status": new_status, "updated_at": now}
            if new_status == Status.STACKED:
                changes.update(started_at=None, completed_at=None)
            elif new_status == Status.READING:
                if item.started_at is None:
                    changes["started_at"] = now
            else:
                changes["completed_at"] = now
            item = item.model_copy(update=changes)
            self.repo.upsert(item)

        logger.info("Set tsundoku item %s to %s", item.id, new_status.value)
        return item

    def restack(self, item_id: str) -> QueueItem:
        """Move a finished item to the back of the stacked queue."""
        with self.repo.transaction():
            item = self.repo.get(item_id)
            if item.status != Status.DONE:
                raise InvalidStatusError(
                    f"item {item_id} is {item.status.value}, not done"
                )

            timestamp = self.now()
            try:
                newest = self.repo.find_newest_stacked()
            except NoStackedItemsError:
                newest = None
            if newest is not None:
                candidate = newest.added_at + RESTACK_STEP
                if not timestamp > candidate:
                    timestamp = candidate

            item = item.model_copy(
                update={
                    "status": Status.STACKED,
                    "added_at": timestamp,
                    "updated_at": timestamp,
                    "started_at": None,
                    "completed_at": None,
                }
            )
            self.repo.upsert(item)

        logger.info("Restacked tsundoku item %s at %s", item.id, timestamp.isoformat())
        return item

    def _ensure_nobody_reading(self) -> None:
        readers = self.repo.list(Status.READING)
        if readers:
            logger.debug("Refusing pickup: %s is being read", readers[0].id)
            raise ReadingInProgressError()

    def _promote(self, item: QueueItem) -> QueueItem:
        now = self.now()
        item = item.model_copy(
            update={
                "status": Status.READING,
                "updated_at": now,
                "started_at": item.started_at or now,
            }
        )
        self.repo.upsert(item)
        return item
