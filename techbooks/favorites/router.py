"""
Routes for the favourites list.

Endpoints under /api/favorites:
- GET    /           : list favourites
- POST   /           : add a book (``{"book": {...}}``)
- DELETE /{book_id}  : remove a book
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_favorites_service
from ..storage import StorageError
from .errors import AlreadyExistsError, FavoritesError, InvalidInputError, NotFoundError
from .schemas import AddFavoriteRequest, FavoriteItem
from .service import FavoritesService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.error("Favorites failure: %s", exc)
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=List[FavoriteItem])
def list_favorites(service: FavoritesService = Depends(get_favorites_service)) -> List[FavoriteItem]:
    try:
        return service.list()
    except StorageError as exc:
        raise _http_error(exc)


@router.post("", response_model=FavoriteItem, status_code=status.HTTP_201_CREATED)
def add_favorite(
    req: AddFavoriteRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteItem:
    try:
        return service.add(req.book)
    except (FavoritesError, StorageError) as exc:
        raise _http_error(exc)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def remove_favorite(
    book_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> Response:
    try:
        service.delete(book_id)
    except (FavoritesError, StorageError) as exc:
        raise _http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
