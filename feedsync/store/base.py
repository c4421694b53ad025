"""Record store Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .records import RecordFields, StoredRecord


class RecordStore(ABC):
    """Uniform store contract so the sync passes can run against any backend."""

    @abstractmethod
    def search(self, query: str) -> list[StoredRecord]:
        """Return records matching ``query``, most recently edited first."""

    @abstractmethod
    def create(self, parent: str, fields: RecordFields) -> StoredRecord:
        """Create a record under the ``parent`` collection."""

    @abstractmethod
    def update(self, record_id: str, fields: RecordFields) -> StoredRecord:
        """Overwrite the fields of an existing record."""

    @abstractmethod
    def archive(self, record_id: str) -> None:
        """Soft-delete a record."""

    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["RecordStore"]
