"""
Club database model.

A club is the tenant boundary: every member, coach, session, application,
attendance record and leave request carries exactly one ``club_id``.
"""

import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class Club(SQLModel, table=True):
    __tablename__ = "clubs"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=100)
    sport_category: str = Field(nullable=False, max_length=50, index=True)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
