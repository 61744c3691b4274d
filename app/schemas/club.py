"""
Club administration API schemas.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.member import AccessFlag


class ClubCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sport_category: str = Field(..., min_length=1, max_length=50)


class ClubResponse(BaseModel):
    id: int
    name: str
    sport_category: str
    is_active: bool
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class CoachCreate(BaseModel):
    identity_id: str = Field(..., min_length=1, max_length=64)
    full_name: Optional[str] = Field(None, max_length=100)


class CoachResponse(BaseModel):
    id: int
    identity_id: str
    club_id: int
    full_name: Optional[str]

    class Config:
        from_attributes = True


class MemberProvision(BaseModel):
    identity_id: str = Field(..., min_length=1, max_length=64)
    full_name: Optional[str] = Field(None, max_length=100)


class MemberResponse(BaseModel):
    id: int
    identity_id: str
    club_id: int
    access_flag: AccessFlag
    full_name: Optional[str]
    nickname: Optional[str]
    phone_number: Optional[str]
    health_notes: Optional[str]
    created_at: datetime.datetime

    class Config:
        from_attributes = True
