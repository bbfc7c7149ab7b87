"""
Pydantic models for the reading queue.

A ``QueueItem`` embeds the ``Book`` it was created from.  Its status
moves between ``stacked``, ``reading`` and ``done``; the timestamps
record when it entered the queue, when it was last touched, when it
was first picked up and when it was finished.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import Field

from ..models import Book, CamelModel, UtcDatetime
from .errors import InvalidStatusError


class Status(str, Enum):
    STACKED = "stacked"
    READING = "reading"
    DONE = "done"

    @classmethod
    def parse(cls, raw: Union[str, "Status"]) -> "Status":
        """Convert a raw value into a ``Status`` or raise ``InvalidStatusError``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            raise InvalidStatusError(f"invalid tsundoku status: {raw!r}") from None


class QueueItem(CamelModel):
    """One entry of the reading queue.

    ``id`` always equals ``book.id``.  ``started_at`` and
    ``completed_at`` are ``None`` while unset and are left out of the
    serialised record.
    """

    id: str
    book: Book
    note: str = ""
    priority: Optional[int] = None
    status: Status = Status.STACKED
    added_at: UtcDatetime
    updated_at: UtcDatetime
    started_at: Optional[UtcDatetime] = None
    completed_at: Optional[UtcDatetime] = None

    def sort_key(self):
        return (self.added_at, self.id)


class AddItemRequest(CamelModel):
    book: Book = Field(default_factory=Book)
    note: str = ""
    priority: Optional[int] = None


class UpdateStatusRequest(CamelModel):
    # Kept as a plain string so unknown values reach the service and
    # come back as a 400 rather than a validation error.
    status: str = ""
