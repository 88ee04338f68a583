"""
counterflow Persistence Layer - SQL Backend

SQLModel-backed audit log. SQLite is the default embedded store; any
SQLAlchemy URL works.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from .base import AuditLogBackend, AuditRecord, AuditEntry, utc_now

logger = logging.getLogger(__name__)


class CountLog(SQLModel, table=True):
    """One row per audit record."""
    __tablename__ = "count_log"
    __table_args__ = {'extend_existing': True}

    id: Optional[int] = Field(default=None, primary_key=True)
    message: str
    created_at: datetime = Field(default_factory=utc_now)

    def to_entry(self) -> AuditEntry:
        return AuditEntry(id=self.id, message=self.message, created_at=self.created_at)


class SQLModelAuditLog(AuditLogBackend):
    """
    Audit log stored in a SQL table through SQLModel.

    Tables are created on construction. Sessions are short-lived, one per
    call, so the backend is safe to use from the recorder's worker thread.
    """

    def __init__(self, url: str = "sqlite:///counterflow.db", echo: bool = False):
        self.url = url
        kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Every connection must see the same in-memory database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        SQLModel.metadata.create_all(self.engine, tables=[CountLog.__table__])
        logger.info(f"Audit log tables initialized: {self.engine.url}")

    def append(self, record: AuditRecord) -> int:
        row = CountLog(message=record.message, created_at=record.created_at)
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            return row.id

    def all(self) -> List[AuditEntry]:
        with Session(self.engine) as session:
            rows = session.exec(select(CountLog).order_by(CountLog.id)).all()
            return [row.to_entry() for row in rows]

    def get(self, entry_id: int) -> Optional[AuditEntry]:
        with Session(self.engine) as session:
            row = session.get(CountLog, entry_id)
            return row.to_entry() if row else None

    def delete(self, entry_id: int) -> bool:
        with Session(self.engine) as session:
            row = session.get(CountLog, entry_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def count(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count()).select_from(CountLog)).one()

    def close(self) -> None:
        self.engine.dispose()
