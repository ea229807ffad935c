"""Unit tests for the record store, permission matrix and counters."""

import pytest

from src.registry.permissions import PermissionMatrix
from src.registry.records import ContentRecord, RecordStore
from src.registry.sequence import BlockHeight, SequenceCounter


def make_record(content_id: int = 1, owner: str = "alice") -> ContentRecord:
    return ContentRecord(
        id=content_id,
        title="Doc",
        owner=owner,
        size=10,
        registered_at=5,
        summary="s",
        labels=["x", "y"],
    )


class TestContentRecord:
    def test_to_dict_is_full_projection(self) -> None:
        assert make_record().to_dict() == {
            "id": 1,
            "title": "Doc",
            "owner": "alice",
            "size": 10,
            "registered_at": 5,
            "summary": "s",
            "labels": ["x", "y"],
        }

    def test_to_dict_copies_labels(self) -> None:
        record = make_record()
        projection = record.to_dict()
        projection["labels"].append("z")
        assert record.labels == ["x", "y"]

    def test_from_dict(self) -> None:
        record = make_record(7, "bob")
        assert ContentRecord.from_dict(record.to_dict()) == record


class TestRecordStore:
    def test_insert_and_get(self) -> None:
        store = RecordStore()
        store.insert(make_record())
        assert store.exists(1)
        assert 1 in store
        assert store.get(1) is not None
        assert len(store) == 1

    def test_get_missing(self) -> None:
        assert RecordStore().get(99) is None

    def test_duplicate_insert_raises(self) -> None:
        store = RecordStore()
        store.insert(make_record())
        with pytest.raises(ValueError):
            store.insert(make_record())

    def test_remove(self) -> None:
        store = RecordStore()
        store.insert(make_record())
        assert store.remove(1) is True
        assert store.remove(1) is False
        assert store.count() == 0

    def test_list_all_in_id_order(self) -> None:
        store = RecordStore()
        store.insert(make_record(3))
        store.insert(make_record(1))
        assert [r["id"] for r in store.list_all()] == [1, 3]


class TestPermissionMatrix:
    def test_absent_entry_reads_false(self) -> None:
        matrix = PermissionMatrix()
        assert matrix.has_grant(1, "alice") is False
        assert matrix.has_entry(1, "alice") is False

    def test_grant(self) -> None:
        matrix = PermissionMatrix()
        matrix.grant(1, "alice")
        assert matrix.has_grant(1, "alice") is True
        assert matrix.has_grant(2, "alice") is False
        assert matrix.has_grant(1, "bob") is False

    def test_false_entry_is_distinct_from_absence(self) -> None:
        matrix = PermissionMatrix()
        matrix.set_entry(1, "bob", False)
        assert matrix.has_grant(1, "bob") is False
        assert matrix.has_entry(1, "bob") is True

    def test_entries(self) -> None:
        matrix = PermissionMatrix()
        matrix.grant(2, "bob")
        matrix.grant(1, "alice")
        assert matrix.entries() == [(1, "alice", True), (2, "bob", True)]
        assert matrix.entries_for(2) == {"bob": True}
        assert matrix.count() == 2


class TestSequenceCounter:
    def test_starts_at_zero(self) -> None:
        counter = SequenceCounter()
        assert counter.value == 0
        assert counter.peek() == 1

    def test_advance_by_one(self) -> None:
        counter = SequenceCounter()
        assert counter.advance() == 1
        assert counter.advance() == 2
        assert counter.value == 2

    def test_peek_does_not_advance(self) -> None:
        counter = SequenceCounter(4)
        counter.peek()
        assert counter.value == 4

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValueError):
            SequenceCounter(-1)


class TestBlockHeight:
    def test_advance(self) -> None:
        height = BlockHeight()
        assert height.current() == 0
        assert height.advance() == 1
        assert height.advance(4) == 5

    def test_set_forward_and_same(self) -> None:
        height = BlockHeight(3)
        assert height.set(3) == 3
        assert height.set(10) == 10

    def test_cannot_move_backwards(self) -> None:
        height = BlockHeight(10)
        with pytest.raises(ValueError):
            height.set(9)
        with pytest.raises(ValueError):
            height.advance(-1)
        assert height.current() == 10
