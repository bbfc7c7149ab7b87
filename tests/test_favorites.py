import json
from datetime import timedelta

import pytest

from techbooks.favorites.errors import AlreadyExistsError, InvalidInputError, NotFoundError
from techbooks.favorites.repository import FileFavoritesRepository
from techbooks.favorites.service import FavoritesService
from tests.conftest import START, make_book


class TestFavoritesService:
    def test_add_and_list_in_order(self, favorites_service, clock):
        favorites_service.add(make_book("b2"))
        clock.advance(seconds=1)
        favorites_service.add(make_book("b1"))

        items = favorites_service.list()

        assert [it.id for it in items] == ["b2", "b1"]
        assert items[0].added_at == START
        assert items[1].added_at == START + timedelta(seconds=1)

    def test_same_timestamp_sorted_by_id(self, favorites_service):
        for book_id in ("c", "a", "b"):
            favorites_service.add(make_book(book_id))

        assert [it.id for it in favorites_service.list()] == ["a", "b", "c"]

    def test_add_requires_id(self, favorites_service):
        with pytest.raises(InvalidInputError):
            favorites_service.add(make_book(""))

    def test_add_duplicate(self, favorites_service):
        favorites_service.add(make_book("b1"))

        with pytest.raises(AlreadyExistsError):
            favorites_service.add(make_book("b1"))

    def test_delete(self, favorites_service):
        favorites_service.add(make_book("b1"))
        favorites_service.add(make_book("b2"))

        favorites_service.delete("b1")

        assert [it.id for it in favorites_service.list()] == ["b2"]

    def test_delete_missing(self, favorites_service):
        with pytest.raises(NotFoundError):
            favorites_service.delete("missing")

    def test_delete_requires_id(self, favorites_service):
        with pytest.raises(InvalidInputError):
            favorites_service.delete("")


class TestFileFavoritesRepository:
    def test_round_trip_through_disk(self, tmp_path, clock):
        path = tmp_path / "favorites.json"
        FavoritesService(FileFavoritesRepository(path), now=clock).add(make_book("b1", "Go in Action"))

        reopened = FavoritesService(FileFavoritesRepository(path), now=clock)
        items = reopened.list()

        assert len(items) == 1
        assert items[0].book.title == "Go in Action"
        assert items[0].added_at == START

        reopened.delete("b1")
        assert json.loads(path.read_text(encoding="utf-8")) == {"items": {}}

    def test_missing_is_not_found(self, tmp_path):
        repo = FileFavoritesRepository(tmp_path / "favorites.json")

        with pytest.raises(NotFoundError):
            repo.get("b1")


def test_in_memory_repository_hands_out_copies(favorites_service, favorites_repo):
    added = favorites_service.add(make_book("b1"))
    added.added_at = START - timedelta(days=1)

    fetched = favorites_repo.get("b1")
    fetched.added_at = START + timedelta(days=1)
    favorites_repo.list()[0].added_at = START + timedelta(days=2)

    assert favorites_repo.get("b1").added_at == START
