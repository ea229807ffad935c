"""Simple record store - in-memory dict of content records"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict


class RecordDict(TypedDict):
    """Type for the full record projection."""

    id: int
    title: str
    owner: str
    size: int
    registered_at: int
    summary: str
    labels: list[str]


@dataclass
class ContentRecord:
    """A registered piece of content metadata.

    The registry never stores payloads, only pointers to describe them:
    - title, summary: human-readable description
    - size: declared payload size
    - labels: ordered categorization tags

    id and registered_at are fixed at creation. owner changes only via an
    explicit transfer by the current owner.
    """

    id: int
    title: str
    owner: str
    size: int
    registered_at: int
    summary: str
    labels: list[str] = field(default_factory=list)

    def to_dict(self) -> RecordDict:
        return {
            "id": self.id,
            "title": self.title,
            "owner": self.owner,
            "size": self.size,
            "registered_at": self.registered_at,
            "summary": self.summary,
            "labels": list(self.labels),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentRecord":
        return cls(
            id=int(data["id"]),
            title=data["title"],
            owner=data["owner"],
            size=data["size"],
            registered_at=int(data["registered_at"]),
            summary=data["summary"],
            labels=list(data["labels"]),
        )


class RecordStore:
    """In-memory mapping from content id to ContentRecord.

    Holds no authorization logic; RegistryService is its only writer.

    Thread-safety: This class is NOT thread-safe. Callers synchronize
    through the service lock.
    """

    records: dict[int, ContentRecord]

    def __init__(self) -> None:
        self.records = {}

    def exists(self, content_id: int) -> bool:
        """Check if a record exists"""
        return content_id in self.records

    def get(self, content_id: int) -> ContentRecord | None:
        """Get a record by id"""
        return self.records.get(content_id)

    def insert(self, record: ContentRecord) -> None:
        """Insert a new record.

        Raises:
            ValueError: If a record with this id already exists
        """
        if record.id in self.records:
            raise ValueError(f"Content id {record.id} is already registered")
        self.records[record.id] = record

    def remove(self, content_id: int) -> bool:
        """Remove a record. Returns False if it did not exist."""
        if content_id not in self.records:
            return False
        del self.records[content_id]
        return True

    def count(self) -> int:
        """Count live records"""
        return len(self.records)

    def list_all(self) -> list[RecordDict]:
        """All live records in id order."""
        return [self.records[cid].to_dict() for cid in sorted(self.records)]

    def clear(self) -> None:
        """Drop all records. Used when restoring a checkpoint."""
        self.records.clear()

    def __contains__(self, content_id: object) -> bool:
        return content_id in self.records

    def __len__(self) -> int:
        return len(self.records)
