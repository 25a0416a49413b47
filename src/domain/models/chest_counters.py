"""Denormalized per-chest counters.

Counters are only ever incremented through compare-and-set on the store, so
two concurrent writers cannot lose an update. Reads are recorded per chit
id, so recording the same read again leaves the counters untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID


@dataclass(frozen=True, eq=True)
class ChestCounters:
    chest_id: UUID
    chit_count: int = field(default=0)
    chit_count_by_author: dict[str, int] = field(default_factory=dict)
    read_count: int = field(default=0)
    read_count_by_reader: dict[str, int] = field(default_factory=dict)
    read_chit_ids: frozenset[str] = field(default_factory=frozenset)

    def chits_by(self, author_id: UUID) -> int:
        return self.chit_count_by_author.get(str(author_id), 0)

    def reads_by(self, reader_id: UUID) -> int:
        return self.read_count_by_reader.get(str(reader_id), 0)

    def has_read(self, chit_id: UUID) -> bool:
        return str(chit_id) in self.read_chit_ids

    def with_chit_added(self, author_id: UUID) -> ChestCounters:
        by_author = dict(self.chit_count_by_author)
        by_author[str(author_id)] = by_author.get(str(author_id), 0) + 1
        return replace(
            self, chit_count=self.chit_count + 1, chit_count_by_author=by_author
        )

    def with_chit_read(self, chit_id: UUID, reader_id: UUID) -> ChestCounters:
        """Count one read of chit_id; returns self if it is already counted."""
        if self.has_read(chit_id):
            return self
        by_reader = dict(self.read_count_by_reader)
        by_reader[str(reader_id)] = by_reader.get(str(reader_id), 0) + 1
        return replace(
            self,
            read_count=self.read_count + 1,
            read_count_by_reader=by_reader,
            read_chit_ids=self.read_chit_ids | {str(chit_id)},
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "chitCount": self.chit_count,
            "chitCountByAuthor": dict(self.chit_count_by_author),
            "readCount": self.read_count,
            "readCountByReader": dict(self.read_count_by_reader),
            "readChitIds": sorted(self.read_chit_ids),
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> ChestCounters:
        return cls(
            chest_id=UUID(doc_id),
            chit_count=int(data.get("chitCount", 0)),
            chit_count_by_author=dict(data.get("chitCountByAuthor", {})),
            read_count=int(data.get("readCount", 0)),
            read_count_by_reader=dict(data.get("readCountByReader", {})),
            read_chit_ids=frozenset(data.get("readChitIds", [])),
        )
