"""
Contract tests run against every reading queue repository.

The file-backed repository also gets checks for its on-disk format and
for surviving a reopen.
"""

import json
import threading
from datetime import timedelta

import pytest

from techbooks.storage import StorageError
from techbooks.tsundoku.errors import NoStackedItemsError, NotFoundError
from techbooks.tsundoku.filestore import FileQueueRepository
from techbooks.tsundoku.repository import InMemoryQueueRepository
from techbooks.tsundoku.schemas import QueueItem, Status
from techbooks.tsundoku.service import QueueService
from tests.conftest import START, make_book


def make_item(item_id, status=Status.STACKED, offset=0, **extra):
    at = START + timedelta(seconds=offset)
    return QueueItem(
        id=item_id,
        book=make_book(item_id),
        status=status,
        added_at=at,
        updated_at=at,
        **extra,
    )


@pytest.fixture(params=["memory", "file"])
def repo(request, tmp_path):
    if request.param == "memory":
        return InMemoryQueueRepository()
    return FileQueueRepository(tmp_path / "data" / "tsundoku.json")


def test_get_missing(repo):
    with pytest.raises(NotFoundError):
        repo.get("nope")


def test_upsert_inserts_and_replaces(repo):
    repo.upsert(make_item("b1", note="first"))
    repo.upsert(make_item("b1", status=Status.READING, note="second"))

    item = repo.get("b1")
    assert item.status == Status.READING
    assert item.note == "second"
    assert len(repo.list()) == 1


def test_list_orders_by_added_at_then_id(repo):
    repo.upsert(make_item("c", offset=0))
    repo.upsert(make_item("b", offset=5))
    repo.upsert(make_item("a", offset=5))
    repo.upsert(make_item("d", status=Status.DONE, offset=1))

    assert [it.id for it in repo.list()] == ["c", "d", "a", "b"]
    assert [it.id for it in repo.list(Status.STACKED)] == ["c", "a", "b"]
    assert [it.id for it in repo.list(Status.DONE)] == ["d"]
    assert repo.list(Status.READING) == []


def test_oldest_and_newest_stacked_tie_breaks(repo):
    for item_id in ("m", "a", "z"):
        repo.upsert(make_item(item_id, offset=10))
    repo.upsert(make_item("old-done", status=Status.DONE, offset=0))
    repo.upsert(make_item("new-reading", status=Status.READING, offset=99))

    assert repo.find_oldest_stacked().id == "a"
    assert repo.find_newest_stacked().id == "z"


def test_oldest_and_newest_by_time(repo):
    repo.upsert(make_item("late", offset=30))
    repo.upsert(make_item("early", offset=1))
    repo.upsert(make_item("middle", offset=15))

    assert repo.find_oldest_stacked().id == "early"
    assert repo.find_newest_stacked().id == "late"


def test_no_stacked_items(repo):
    repo.upsert(make_item("b1", status=Status.DONE))

    with pytest.raises(NoStackedItemsError):
        repo.find_oldest_stacked()
    with pytest.raises(NoStackedItemsError):
        repo.find_newest_stacked()


def test_returned_items_are_snapshots(repo):
    repo.upsert(make_item("b1"))

    fetched = repo.get("b1")
    fetched.note = "changed outside"

    assert repo.get("b1").note == ""


def test_transaction_blocks_other_threads(repo):
    repo.upsert(make_item("b1"))
    seen = []

    def writer():
        repo.upsert(make_item("b2", offset=1))
        seen.append("written")

    with repo.transaction():
        thread = threading.Thread(target=writer)
        thread.start()
        thread.join(timeout=0.2)
        assert seen == []
        assert [it.id for it in repo.list()] == ["b1"]
    thread.join(timeout=5)

    assert seen == ["written"]
    assert [it.id for it in repo.list()] == ["b1", "b2"]


class TestFileQueueRepository:
    def test_creates_empty_collection(self, tmp_path):
        path = tmp_path / "nested" / "tsundoku.json"
        FileQueueRepository(path)

        assert json.loads(path.read_text(encoding="utf-8")) == {"items": {}}

    def test_survives_reopen(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        FileQueueRepository(path).upsert(
            make_item("b1", status=Status.DONE, completed_at=START, priority=3)
        )

        item = FileQueueRepository(path).get("b1")

        assert item.status == Status.DONE
        assert item.completed_at == START
        assert item.priority == 3
        assert item.added_at == START

    def test_record_shape(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        FileQueueRepository(path).upsert(make_item("b1", note="soon"))

        record = json.loads(path.read_text(encoding="utf-8"))["items"]["b1"]

        assert record["id"] == "b1"
        assert record["status"] == "stacked"
        assert record["note"] == "soon"
        assert record["book"]["id"] == "b1"
        assert "pageCount" in record["book"]
        assert "addedAt" in record and "updatedAt" in record
        assert "startedAt" not in record
        assert "completedAt" not in record
        assert "priority" not in record

    def test_corrupt_record_is_a_storage_error(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        path.write_text(json.dumps({"items": {"b1": {"id": "b1"}}}), encoding="utf-8")
        repo = FileQueueRepository(path)

        with pytest.raises(StorageError):
            repo.list()

    def test_malformed_file_is_a_storage_error(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        path.write_text("{not json", encoding="utf-8")
        repo = FileQueueRepository(path)

        with pytest.raises(StorageError):
            repo.get("b1")


class TestNaiveTimestamps:
    """Records written without a UTC offset are read back as UTC."""

    def _write(self, path, records):
        path.write_text(json.dumps({"items": records}), encoding="utf-8")

    def _record(self, item_id, status, added_at):
        return {
            "id": item_id,
            "book": {"id": item_id},
            "status": status,
            "addedAt": added_at,
            "updatedAt": added_at,
        }

    def test_loaded_as_utc(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        self._write(path, {"b1": self._record("b1", "stacked", "2024-01-01T09:00:00")})

        item = FileQueueRepository(path).get("b1")

        assert item.added_at == START
        assert item.added_at.tzinfo is not None

    def test_mixed_offsets_sort_together(self, tmp_path):
        path = tmp_path / "tsundoku.json"
        self._write(
            path,
            {
                "naive": self._record("naive", "stacked", "2024-01-01T09:00:05"),
                "aware": self._record("aware", "stacked", "2024-01-01T10:00:00+01:00"),
            },
        )
        repo = FileQueueRepository(path)

        assert [it.id for it in repo.list()] == ["aware", "naive"]
        assert repo.find_newest_stacked().id == "naive"

    def test_restack_after_naive_records(self, tmp_path, clock):
        path = tmp_path / "tsundoku.json"
        self._write(
            path,
            {
                "b1": self._record("b1", "done", "2023-12-31T00:00:00"),
                "b2": self._record("b2", "stacked", "2024-01-01T09:00:00"),
            },
        )
        service = QueueService(FileQueueRepository(path), now=clock)

        item = service.restack("b1")

        assert item.added_at == START + timedelta(milliseconds=1)
        assert [it.id for it in service.list("stacked")] == ["b2", "b1"]
