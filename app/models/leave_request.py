"""
Leave request database model.

A member's request to be excused from one session.  At most one pending
request per (session, member) is enforced by a partial unique index.
"""

import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Index, String, text
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class LeaveStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class LeaveRequest(SQLModel, table=True):
    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("uq_leave_pending_session_member", "session_id", "member_id", unique=True,
              postgresql_where=text("status = 'pending'"), sqlite_where=text("status = 'pending'"), ),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="training_sessions.id", nullable=False, index=True)
    member_id: int = Field(foreign_key="members.id", nullable=False, index=True)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)

    reason: str = Field(nullable=False, max_length=500)
    status: LeaveStatus = Field(default=LeaveStatus.pending,
                                sa_column=Column(String(20), nullable=False, index=True,
                                                 default=LeaveStatus.pending.value))

    requested_by: str = Field(nullable=False, max_length=64)
    reviewed_by: Optional[str] = Field(default=None, max_length=64)
    reviewed_at: Optional[datetime.datetime] = Field(default=None, sa_type=DateTime)
    review_notes: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
