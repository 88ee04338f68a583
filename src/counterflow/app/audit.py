"""
Audit Recorder

Fire-and-forget hand-off between the engine and an audit log backend.
record() only enqueues; a background worker drains the queue and performs
the blocking backend call in a thread. Nothing here ever reaches back into
engine state.
"""

import asyncio
import logging
from typing import Optional

from ..persistence.base import AuditLogBackend, AuditRecord

logger = logging.getLogger(__name__)


class AuditRecorder:
    """
    Decoupled writer for audit records.

    Writes are applied in the order they were recorded, independently of
    state publication. A failing write is logged and dropped.
    """

    def __init__(self, backend: AuditLogBackend):
        self.backend = backend
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._written = 0
        self._failed = 0

    def record(self, message: str) -> None:
        """
        Queue a record for writing. Never blocks and never raises on write failure.

        Must be called from inside a running event loop.
        """
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._queue.put_nowait(AuditRecord(message=message))
        self._ensure_worker()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            loop = asyncio.get_running_loop()
            self._worker = loop.create_task(self._write_loop(), name="counterflow-audit")

    async def _write_loop(self) -> None:
        """Internal loop that drains the queue until cancelled."""
        while True:
            record = await self._queue.get()
            try:
                entry_id = await asyncio.to_thread(self.backend.append, record)
                self._written += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._failed += 1
                logger.warning(f"Audit write dropped ({record.message!r}): {e}")
                continue
            finally:
                self._queue.task_done()

            if logger.isEnabledFor(logging.DEBUG):
                try:
                    entries = await asyncio.to_thread(self.backend.all)
                    logger.debug(f"Audit entry {entry_id} stored, log now: {[e.message for e in entries]}")
                except Exception as e:
                    logger.debug(f"Audit entry {entry_id} stored, read-back failed: {e}")

    async def drain(self) -> None:
        """Wait until every queued record has been written or dropped."""
        if self._queue is not None:
            await self._queue.join()

    async def aclose(self) -> None:
        """Drain pending writes and stop the worker."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    @property
    def pending(self) -> int:
        """Records queued but not yet processed."""
        return self._queue.qsize() if self._queue is not None else 0

    @property
    def written(self) -> int:
        return self._written

    @property
    def failed(self) -> int:
        return self._failed
