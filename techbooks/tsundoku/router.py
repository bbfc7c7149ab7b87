"""
Routes for the reading queue.

Endpoints under /api/tsundoku:
- GET  /                : list items, optionally ``?status=stacked|reading|done``
- POST /                : stack a book
- POST /pickup          : start reading the oldest stacked book
- POST /{item_id}/pickup  : start reading a specific stacked book
- POST /{item_id}/status  : force a status
- POST /{item_id}/restack : put a finished book back at the end of the queue
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_queue_service
from ..storage import StorageError
from .errors import (
    AlreadyExistsError,
    InvalidInputError,
    InvalidStatusError,
    NoStackedItemsError,
    NotFoundError,
    ReadingInProgressError,
    TsundokuError,
)
from .schemas import AddItemRequest, QueueItem, UpdateStatusRequest
from .service import QueueService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tsundoku", tags=["tsundoku"])

STATUS_CODES: Dict[Type[TsundokuError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NoStackedItemsError: status.HTTP_404_NOT_FOUND,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    InvalidStatusError: status.HTTP_400_BAD_REQUEST,
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    ReadingInProgressError: status.HTTP_409_CONFLICT,
}


def _http_error(exc: Exception, invalid_status_detail: Optional[str] = None) -> HTTPException:
    """Translate a service error into an ``HTTPException``."""
    code = STATUS_CODES.get(type(exc))
    if code is None:
        if isinstance(exc, StorageError):
            logger.error("Tsundoku storage failure: %s", exc)
        else:
            logger.exception("Unexpected tsundoku error")
        return HTTPException(status_code=500, detail="internal error")
    detail = str(exc)
    if invalid_status_detail and isinstance(exc, InvalidStatusError):
        detail = invalid_status_detail
    return HTTPException(status_code=code, detail=detail)


# response_model_exclude_none drops unset timestamps and priority.
ITEM_ROUTE = dict(response_model=QueueItem, response_model_exclude_none=True)


@router.get("", response_model=List[QueueItem], response_model_exclude_none=True)
def list_items(
    status_filter: Optional[str] = Query(default=None, alias="status", description="Filter by status"),
    service: QueueService = Depends(get_queue_service),
) -> List[QueueItem]:
    try:
        return service.list((status_filter or "").strip() or None)
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc)


@router.post("", status_code=status.HTTP_201_CREATED, **ITEM_ROUTE)
def add_item(
    req: AddItemRequest,
    service: QueueService = Depends(get_queue_service),
) -> QueueItem:
    try:
        return service.add(req.book, note=req.note.strip(), priority=req.priority)
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc)


@router.post("/pickup", **ITEM_ROUTE)
def pickup(service: QueueService = Depends(get_queue_service)) -> QueueItem:
    try:
        return service.pickup()
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc)


@router.post("/{item_id}/pickup", **ITEM_ROUTE)
def pick_specific(item_id: str, service: QueueService = Depends(get_queue_service)) -> QueueItem:
    try:
        return service.start_reading(item_id)
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc, invalid_status_detail="only stacked items can be picked")


@router.post("/{item_id}/status", **ITEM_ROUTE)
def update_status(
    item_id: str,
    req: Optional[UpdateStatusRequest] = None,
    service: QueueService = Depends(get_queue_service),
) -> QueueItem:
    try:
        return service.update_status(item_id, (req or UpdateStatusRequest()).status.strip())
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc)


@router.post("/{item_id}/restack", **ITEM_ROUTE)
def restack(item_id: str, service: QueueService = Depends(get_queue_service)) -> QueueItem:
    try:
        return service.restack(item_id)
    except (TsundokuError, StorageError) as exc:
        raise _http_error(exc, invalid_status_detail="only completed items can be restacked")
