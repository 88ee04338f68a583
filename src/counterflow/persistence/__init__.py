"""
counterflow Persistence Module

Audit log backends. The engine never reads from these; it only hands
records to the AuditRecorder, which writes them here.
"""

from .base import AuditLogBackend, AuditRecord, AuditEntry
from .memory import MemoryAuditLog
from .sql import CountLog, SQLModelAuditLog

__all__ = [
    "AuditLogBackend",
    "AuditRecord",
    "AuditEntry",
    "MemoryAuditLog",
    "CountLog",
    "SQLModelAuditLog",
]
