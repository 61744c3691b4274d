"""
Actor schema.

The already-verified caller identity every core operation receives.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    admin = "admin"
    coach = "coach"
    member = "member"


class Actor(BaseModel):
    """Identity + role + club scope of the current caller.

    ``member_id`` / ``coach_id`` are the resolved row ids for members and
    coaches; administrators carry neither and usually no club.
    """

    identity_id: str
    role: Role
    club_id: Optional[int] = None
    member_id: Optional[int] = None
    coach_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin

    @property
    def is_coach(self) -> bool:
        return self.role == Role.coach

    @property
    def is_member(self) -> bool:
        return self.role == Role.member
