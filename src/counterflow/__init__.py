"""
counterflow - Reactive Counter View-Model

A counter engine with a delayed, cancellable clear, an observable stream
of immutable state snapshots and a fire-and-forget audit log.
"""

# Core must load before config (config reads the limits from core.state)
from .core import (
    CounterState, CounterAction, CounterEngine, MIN_LIMIT, MAX_LIMIT,
    CounterError, StaleTimerFire, EngineClosedError,
)
from .config import ApplicationConfig, EngineConfig, Environment, get_config, set_config
from .app import StateStream, InProcessStateStream, AuditRecorder
from .app.configurator import build_engine, build_audit_backend, configure_logging
from .persistence import AuditLogBackend, AuditRecord, MemoryAuditLog, SQLModelAuditLog

__all__ = [
    # Core
    'CounterState',
    'CounterAction',
    'CounterEngine',
    'MIN_LIMIT',
    'MAX_LIMIT',
    'CounterError',
    'StaleTimerFire',
    'EngineClosedError',

    # Configuration
    'ApplicationConfig',
    'EngineConfig',
    'Environment',
    'get_config',
    'set_config',

    # Application service layer
    'StateStream',
    'InProcessStateStream',
    'AuditRecorder',
    'build_engine',
    'build_audit_backend',
    'configure_logging',

    # Persistence
    'AuditLogBackend',
    'AuditRecord',
    'MemoryAuditLog',
    'SQLModelAuditLog',
]
