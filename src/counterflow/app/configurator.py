"""
Application Configurator

Builds the engine and its collaborators from an ApplicationConfig and
sets up logging. Handles initialization order so callers only deal with
one entry point.
"""

import logging
import logging.handlers
from typing import Optional

from ..config import ApplicationConfig, LoggingConfig, PersistenceConfig, get_config
from ..core.engine import CounterEngine
from ..persistence import AuditLogBackend, MemoryAuditLog, SQLModelAuditLog
from .audit import AuditRecorder
from .bus import InProcessStateStream

logger = logging.getLogger(__name__)

_HANDLER_NAME = "counterflow"


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Attach counterflow's handlers to the package logger.

    Calling it again replaces the previous handlers instead of stacking them.
    """
    config = config or get_config().logging
    root = logging.getLogger("counterflow")
    root.setLevel(config.level.upper())

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format)

    stream_handler = logging.StreamHandler()
    stream_handler.set_name(_HANDLER_NAME)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if config.file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        file_handler.set_name(_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def build_audit_backend(config: Optional[PersistenceConfig] = None) -> AuditLogBackend:
    """Create the audit log backend named by the persistence config."""
    config = config or get_config().persistence

    if config.backend == "memory":
        return MemoryAuditLog()
    if config.backend == "sql":
        return SQLModelAuditLog(url=config.url, echo=config.echo)
    raise ValueError(f"Unknown audit backend: {config.backend!r}")


def build_engine(
    config: Optional[ApplicationConfig] = None,
    backend: Optional[AuditLogBackend] = None,
    initial_count: int = 0,
) -> CounterEngine:
    """
    Wire a CounterEngine with its state stream and audit recorder.

    Args:
        config: Application configuration (defaults to get_config())
        backend: Pre-built audit backend; built from config when omitted
        initial_count: Starting count, clamped into range
    """
    config = config or get_config()
    backend = backend if backend is not None else build_audit_backend(config.persistence)

    engine = CounterEngine(
        config=config.engine,
        stream=InProcessStateStream(),
        audit=AuditRecorder(backend),
        initial_count=initial_count,
    )
    logger.info(
        f"Counter engine ready: range [{config.engine.min_limit}, {config.engine.max_limit}], "
        f"reset delay {config.engine.reset_delay}s, audit backend {type(backend).__name__}"
    )
    return engine
