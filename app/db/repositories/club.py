"""
Club, coach and member repositories.

Handles database operations for the tenant and people tables.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from app.models.club import Club
from app.models.coach import Coach
from app.models.member import Member


class ClubRepository:
    """Repository for Club database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, club: Club) -> Club:
        self.session.add(club)
        self.session.flush()
        self.session.refresh(club)
        return club

    def get_by_id(self, club_id: int) -> Optional[Club]:
        return self.session.get(Club, club_id)

    def list(self, statement=None) -> list[Club]:
        statement = statement if statement is not None else select(Club)
        return list(self.session.exec(statement.order_by(Club.name)).all())


class CoachRepository:
    """Repository for Coach database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, coach: Coach) -> Coach:
        self.session.add(coach)
        self.session.flush()
        self.session.refresh(coach)
        return coach

    def get_by_id(self, coach_id: int) -> Optional[Coach]:
        return self.session.get(Coach, coach_id)

    def get_by_identity(self, identity_id: str) -> Optional[Coach]:
        statement = select(Coach).where(Coach.identity_id == identity_id)
        return self.session.exec(statement).first()


class MemberRepository:
    """Repository for Member database operations.

    ``set_access_flag`` is the only writer of ``Member.access_flag``; it is
    called from the application review path alone.
    """

    def __init__(self, session: Session):
        self.session = session

    def create(self, member: Member) -> Member:
        self.session.add(member)
        self.session.flush()
        self.session.refresh(member)
        return member

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self.session.get(Member, member_id)

    def get_by_identity(self, identity_id: str, club_id: Optional[int] = None) -> Optional[Member]:
        statement = select(Member).where(Member.identity_id == identity_id)
        if club_id is not None:
            statement = statement.where(Member.club_id == club_id)
        return self.session.exec(statement.order_by(Member.id)).first()

    def list(self, statement) -> list[Member]:
        return list(self.session.exec(statement.order_by(Member.full_name, Member.id)).all())

    def update(self, member: Member) -> Member:
        self.session.add(member)
        self.session.flush()
        self.session.refresh(member)
        return member

    def set_access_flag(self, member: Member, flag: str, updated_at) -> Member:
        member.access_flag = flag
        member.updated_at = updated_at
        return self.update(member)
