"""
counterflow Persistence Layer - Base Classes

This module provides the abstract interface for audit log backends.
The audit log is append-only from the engine's point of view; reads and
deletes exist for the operator, never for the engine.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecord(BaseModel):
    """A single audit entry handed from the engine to a backend."""
    message: str
    created_at: datetime = Field(default_factory=utc_now)


class AuditEntry(AuditRecord):
    """A stored audit entry, as read back from a backend."""
    id: int


class AuditLogBackend(ABC):
    """
    Abstract base class for audit log backends.

    Implementations are called from a worker thread by the AuditRecorder,
    so every method is synchronous.
    """

    @abstractmethod
    def append(self, record: AuditRecord) -> int:
        """
        Append a record to the log.

        Args:
            record: Record to store

        Returns:
            The id assigned to the new entry
        """
        pass

    @abstractmethod
    def all(self) -> List[AuditEntry]:
        """
        Return every stored entry ordered by id ascending.
        """
        pass

    @abstractmethod
    def delete(self, entry_id: int) -> bool:
        """
        Delete an entry.

        Args:
            entry_id: Id returned by append()

        Returns:
            True if an entry was removed, False otherwise
        """
        pass

    def get(self, entry_id: int) -> Optional[AuditEntry]:
        """Return a single entry, or None if it does not exist."""
        for entry in self.all():
            if entry.id == entry_id:
                return entry
        return None

    def count(self) -> int:
        """Number of stored entries."""
        return len(self.all())

    def close(self) -> None:
        """Release backend resources."""
        pass
