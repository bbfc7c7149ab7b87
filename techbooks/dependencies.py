"""FastAPI dependencies returning the services wired in ``create_app``."""

from fastapi import Request

from .catalog.service import BookSearchService
from .favorites.service import FavoritesService
from .tsundoku.service import QueueService


def get_queue_service(request: Request) -> QueueService:
    return request.app.state.queue_service


def get_favorites_service(request: Request) -> FavoritesService:
    return request.app.state.favorites_service


def get_search_service(request: Request) -> BookSearchService:
    return request.app.state.search_service
