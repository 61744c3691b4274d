"""
Audit log database model.

Write-once rows; nothing in the code base updates or deletes them.
"""

import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Index, JSON
from sqlmodel import Field, SQLModel


class AuditLogEntry(SQLModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (Index("ix_audit_logs_created_at_id", "created_at", "id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    actor_id: Optional[str] = Field(default=None, max_length=64, index=True)
    actor_role: Optional[str] = Field(default=None, max_length=20)
    club_id: Optional[int] = Field(default=None, index=True)

    action_type: str = Field(nullable=False, max_length=64, index=True)
    entity_type: str = Field(nullable=False, max_length=64, index=True)
    entity_id: Optional[str] = Field(default=None, max_length=64)
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Server-assigned by the recorder, never by the caller.
    created_at: datetime.datetime = Field(nullable=False, sa_type=DateTime)
