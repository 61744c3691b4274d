"""
Leave request API schemas.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.membership.transitions import LeaveDecision
from app.models.leave_request import LeaveStatus


class LeaveRequestCreate(BaseModel):
    session_id: int
    reason: str = Field(..., max_length=500)


class LeaveReview(BaseModel):
    decision: LeaveDecision
    notes: Optional[str] = Field(None, max_length=1000)


class LeaveRequestResponse(BaseModel):
    id: int
    session_id: int
    member_id: int
    club_id: int
    reason: str
    status: LeaveStatus
    requested_by: str
    reviewed_by: Optional[str]
    reviewed_at: Optional[datetime.datetime]
    review_notes: Optional[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    class Config:
        from_attributes = True
