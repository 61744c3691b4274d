"""
Membership application database model.

``personal_info``, ``documents`` and ``activity_log`` are stored as JSON but
are always written from the validated records in
:mod:`app.schemas.application`.
"""

import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Index, JSON, String, text
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    info_requested = "info_requested"


class MembershipApplication(SQLModel, table=True):
    """A single request by a member to join a club.

    Review metadata (``reviewed_by``/``reviewed_at``) is set iff the status
    is ``approved`` or ``rejected``.
    """

    __tablename__ = "membership_applications"
    __table_args__ = (
        # At most one pending application per (member, club).
        Index("uq_applications_pending_member_club", "member_id", "club_id", unique=True,
              postgresql_where=text("status = 'pending'"), sqlite_where=text("status = 'pending'"), ),)

    id: Optional[int] = Field(default=None, primary_key=True)
    member_id: int = Field(foreign_key="members.id", nullable=False, index=True)
    identity_id: str = Field(nullable=False, max_length=64)
    club_id: int = Field(foreign_key="clubs.id", nullable=False, index=True)

    status: ApplicationStatus = Field(default=ApplicationStatus.pending,
                                      sa_column=Column(String(20), nullable=False, index=True,
                                                       default=ApplicationStatus.pending.value))

    # Validated snapshots
    personal_info: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    documents: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    activity_log: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Review metadata
    reviewed_by: Optional[str] = Field(default=None, max_length=64)
    reviewed_at: Optional[datetime.datetime] = Field(default=None, sa_type=DateTime)
    review_notes: Optional[str] = Field(default=None, max_length=1000)
    rejection_reason: Optional[str] = Field(default=None, max_length=1000)
    requested_changes: Optional[list] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
