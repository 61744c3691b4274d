"""
Audit log repository.

Append and read only; there is deliberately no update or delete method.
"""

import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.audit_log import AuditLogEntry


class AuditLogRepository:
    """Repository for AuditLogEntry database operations."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        self.session.add(entry)
        self.session.flush()
        self.session.refresh(entry)
        return entry

    def latest_timestamp(self) -> Optional[datetime.datetime]:
        return self.session.exec(select(func.max(AuditLogEntry.created_at))).first()

    def query(self, statement, limit: int, offset: int) -> list[AuditLogEntry]:
        statement = (statement.order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc()).offset(
            offset).limit(limit))
        return list(self.session.exec(statement).all())

    def count(self, statement) -> int:
        count_statement = select(func.count()).select_from(statement.subquery())
        return self.session.exec(count_statement).first() or 0
