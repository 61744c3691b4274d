"""
Coach database model.

A coach has authority over exactly one club.
"""

import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class Coach(SQLModel, table=True):
    __tablename__ = "coaches"

    id: Optional[int] = Field(default=None, primary_key=True)
    identity_id: str = Field(unique=True, nullable=False, max_length=64, index=True)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)
    full_name: Optional[str] = Field(default=None, max_length=100)

    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
