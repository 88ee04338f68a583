"""
Application Service Layer

Bridges the engine and its collaborators:
- bus: observable stream of state snapshots for the presentation layer
- audit: fire-and-forget hand-off to the audit log
- configurator: wiring from ApplicationConfig (import it explicitly)
"""

from .bus import StateStream, InProcessStateStream
from .audit import AuditRecorder

__all__ = [
    'StateStream',
    'InProcessStateStream',
    'AuditRecorder',
]
