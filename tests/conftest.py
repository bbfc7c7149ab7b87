"""Shared fixtures: a controllable clock, in-memory repositories and an API client."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from techbooks.catalog.errors import CatalogError
from techbooks.catalog.schemas import SearchParams, SearchResult
from techbooks.config import Settings
from techbooks.favorites.repository import InMemoryFavoritesRepository
from techbooks.favorites.service import FavoritesService
from techbooks.main import create_app
from techbooks.models import Book
from techbooks.tsundoku.repository import InMemoryQueueRepository
from techbooks.tsundoku.service import QueueService


START = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class FakeCatalogClient:
    def __init__(self, result: Optional[SearchResult] = None, fail: bool = False):
        self.result = result or SearchResult()
        self.fail = fail
        self.calls: List[SearchParams] = []

    def search(self, params: SearchParams) -> SearchResult:
        self.calls.append(params)
        if self.fail:
            raise CatalogError("boom")
        return self.result


def make_book(book_id: str, title: str = "") -> Book:
    return Book(id=book_id, title=title or f"Book {book_id}", authors=["Someone"])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue_repo():
    return InMemoryQueueRepository()


@pytest.fixture
def queue_service(queue_repo, clock):
    return QueueService(queue_repo, now=clock)


@pytest.fixture
def favorites_repo():
    return InMemoryFavoritesRepository()


@pytest.fixture
def favorites_service(favorites_repo, clock):
    return FavoritesService(favorites_repo, now=clock)


@pytest.fixture
def catalog_client():
    return FakeCatalogClient()


@pytest.fixture
def client(tmp_path, queue_repo, favorites_repo, catalog_client, clock):
    settings = Settings(
        tsundoku_file=str(tmp_path / "tsundoku.json"),
        favorites_file=str(tmp_path / "favorites.json"),
    )
    app = create_app(
        settings=settings,
        tsundoku_repo=queue_repo,
        favorites_repo=favorites_repo,
        catalog_client=catalog_client,
        now=clock,
    )
    with TestClient(app) as test_client:
        yield test_client
