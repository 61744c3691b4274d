"""
Training session database model.

A scheduled club activity against which attendance and leave are tracked.
Cancellation is a status change; sessions are never deleted.
"""

import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, String
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class SessionStatus(str, Enum):
    scheduled = "scheduled"
    cancelled = "cancelled"


class TrainingSession(SQLModel, table=True):
    """A single scheduled training session owned by one coach."""

    __tablename__ = "training_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)
    coach_id: int = Field(foreign_key="coaches.id", nullable=False, index=True)

    title: str = Field(nullable=False, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    session_date: datetime.date = Field(nullable=False, index=True)
    start_time: datetime.time = Field(nullable=False)
    end_time: datetime.time = Field(nullable=False)
    location: str = Field(nullable=False, max_length=200)

    status: SessionStatus = Field(default=SessionStatus.scheduled,
                                  sa_column=Column(String(20), nullable=False,
                                                   default=SessionStatus.scheduled.value))
    cancelled_at: Optional[datetime.datetime] = Field(default=None, sa_type=DateTime)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)

    @property
    def starts_at(self) -> datetime.datetime:
        return datetime.datetime.combine(self.session_date, self.start_time)

    @property
    def is_cancelled(self) -> bool:
        return self.status == SessionStatus.cancelled
