"""
Attendance API schemas.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.attendance import AttendanceStatus, CheckInMethod


class AttendanceMark(BaseModel):
    """Coach-entered attendance for one member."""

    member_id: int
    status: AttendanceStatus
    notes: Optional[str] = Field(None, max_length=1000)


class CheckInRequest(BaseModel):
    """Self-service check-in by the member."""

    method: CheckInMethod = CheckInMethod.qr


class AttendanceResponse(BaseModel):
    id: int
    session_id: int
    member_id: int
    club_id: int
    status: AttendanceStatus
    check_in_time: Optional[datetime.datetime]
    check_in_method: CheckInMethod
    marked_by: Optional[str]
    notes: Optional[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    class Config:
        from_attributes = True


class AttendanceStats(BaseModel):
    """Derived statistics, recomputed from the ledger on every read."""

    total_records: int = Field(..., ge=0)
    total_attendance: int = Field(..., ge=0)
    monthly_attendance: int = Field(..., ge=0)
    attendance_rate: float = Field(..., ge=0.0, le=100.0)
