"""
Member (athlete) database model.

``access_flag`` is the single source of truth for whether the member may use
club features.  Only an approved membership application sets it to
``active``.
"""

import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class AccessFlag(str, Enum):
    pending = "pending"
    active = "active"
    rejected = "rejected"
    suspended = "suspended"


class Member(SQLModel, table=True):
    """A person with club affiliation.

    One row per (identity, club).  ``club_id`` is assigned when the identity
    is provisioned and never changes.  Rows are never deleted.
    """

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("identity_id", "club_id", name="uq_members_identity_club"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    identity_id: str = Field(nullable=False, max_length=64, index=True)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)
    access_flag: AccessFlag = Field(default=AccessFlag.pending,
                                    sa_column=Column(String(20), nullable=False, default=AccessFlag.pending.value))

    # Profile
    full_name: Optional[str] = Field(default=None, max_length=100)
    nickname: Optional[str] = Field(default=None, max_length=50)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    health_notes: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
