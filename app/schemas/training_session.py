"""
Training session API schemas.

Date and time-order rules depend on "now", so they are checked by the
service, not here.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.training_session import SessionStatus


class TrainingSessionCreate(BaseModel):
    """Schema for scheduling a training session."""

    title: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    session_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    location: str = Field(..., max_length=200)


class TrainingSessionUpdate(BaseModel):
    """Schema for editing a training session; omitted fields are kept."""

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    session_date: Optional[datetime.date] = None
    start_time: Optional[datetime.time] = None
    end_time: Optional[datetime.time] = None
    location: Optional[str] = Field(None, max_length=200)


class TrainingSessionResponse(BaseModel):
    """Schema for training session in API responses."""

    id: int
    club_id: int
    coach_id: int
    title: str
    description: Optional[str]
    session_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    location: str
    status: SessionStatus
    cancelled_at: Optional[datetime.datetime]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    class Config:
        from_attributes = True
