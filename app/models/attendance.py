"""
Attendance record database model.

At most one record exists per (session, member); the unique constraint is
what the ledger's upsert targets.
"""

import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    late = "late"
    excused = "excused"


class CheckInMethod(str, Enum):
    manual = "manual"
    qr = "qr"
    auto = "auto"


class AttendanceRecord(SQLModel, table=True):
    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint("session_id", "member_id", name="uq_attendance_session_member"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="training_sessions.id", nullable=False, index=True)
    member_id: int = Field(foreign_key="members.id", nullable=False, index=True)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)

    status: AttendanceStatus = Field(sa_column=Column(String(20), nullable=False))
    check_in_time: Optional[datetime.datetime] = Field(default=None, sa_type=DateTime)
    check_in_method: CheckInMethod = Field(default=CheckInMethod.manual,
                                           sa_column=Column(String(20), nullable=False,
                                                            default=CheckInMethod.manual.value))
    marked_by: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
