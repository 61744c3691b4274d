"""
Audit log API schemas.
"""

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditQuery(BaseModel):
    """Optional filters for audit log queries."""

    actor_id: Optional[str] = None
    entity_type: Optional[str] = None
    action_type: Optional[str] = None
    start: Optional[datetime.datetime] = None
    end: Optional[datetime.datetime] = None
    limit: int = Field(50, ge=1, le=500)
    offset: int = Field(0, ge=0)


class AuditEntryResponse(BaseModel):
    id: int
    actor_id: Optional[str]
    actor_role: Optional[str]
    club_id: Optional[int]
    action_type: str
    entity_type: str
    entity_id: Optional[str]
    details: Optional[dict[str, Any]]
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class AuditPage(BaseModel):
    total: int
    entries: list[AuditEntryResponse]
