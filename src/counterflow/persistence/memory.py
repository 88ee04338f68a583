"""
counterflow Persistence Layer - Memory Backend

In-memory audit log implementation for development and testing.
"""

import threading
from typing import List

from .base import AuditLogBackend, AuditRecord, AuditEntry


class MemoryAuditLog(AuditLogBackend):
    """
    In-memory audit log.

    Data is lost when the application restarts. A lock guards the list
    because the recorder writes from a worker thread.
    """

    def __init__(self):
        self._entries: List[AuditEntry] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def append(self, record: AuditRecord) -> int:
        with self._lock:
            entry = AuditEntry(id=self._next_id, **record.model_dump())
            self._entries.append(entry)
            self._next_id += 1
            return entry.id

    def all(self) -> List[AuditEntry]:
        with self._lock:
            return list(self._entries)

    def delete(self, entry_id: int) -> bool:
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    del self._entries[index]
                    return True
            return False

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def close(self) -> None:
        with self._lock:
            self._entries.clear()
