"""
Club administration service.

Administrators create clubs and provision the coaches and members that
belong to them.  Provisioned members start with access flag ``pending``;
only an approved application activates them.
"""

from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.clock import Clock, now, utcnow
from app.core.exceptions import Conflict, NotFound
from app.db.repositories.club import ClubRepository, CoachRepository, MemberRepository
from app.membership import guard
from app.models.club import Club
from app.models.coach import Coach
from app.models.member import AccessFlag, Member
from app.schemas.actor import Actor, Role
from app.schemas.club import (ClubCreate, ClubResponse, CoachCreate, CoachResponse, MemberProvision,
                              MemberResponse, )
from app.services.base import BaseService
from app.services.notification_service import NotificationDispatcher


class ClubService(BaseService):
    """Service for club administration."""

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(session, clock, dispatcher)
        self.repository = ClubRepository(session)
        self.coaches = CoachRepository(session)
        self.members = MemberRepository(session)

    def create_club(self, actor: Actor, data: ClubCreate) -> ClubResponse:
        guard.require_role(actor, Role.admin)
        with self.unit_of_work():
            stamp = utcnow()
            club = self.repository.create(Club(name=data.name.strip(), sport_category=data.sport_category.strip(),
                                               created_at=stamp, updated_at=stamp))
            self.audit.record_for(actor, "club_created", "club", club.id, {"name": club.name}, club_id=club.id)
        logger.info("Club {} created: {}", club.id, club.name)
        return ClubResponse.model_validate(club)

    def add_coach(self, actor: Actor, club_id: int, data: CoachCreate) -> CoachResponse:
        guard.require_role(actor, Role.admin)
        club = self._get_club(club_id)
        with self.unit_of_work():
            if self.coaches.get_by_identity(data.identity_id) is not None:
                raise Conflict("This identity is already a coach")
            stamp = utcnow()
            try:
                coach = self.coaches.create(Coach(identity_id=data.identity_id, club_id=club.id,
                                                  full_name=data.full_name, created_at=stamp, updated_at=stamp))
            except IntegrityError as exc:
                raise Conflict("This identity is already a coach") from exc
            self.audit.record_for(actor, "coach_added", "coach", coach.id, {"identity_id": coach.identity_id},
                                  club_id=club.id, )
        return CoachResponse.model_validate(coach)

    def provision_member(self, actor: Actor, club_id: int, data: MemberProvision) -> MemberResponse:
        guard.require_role(actor, Role.admin)
        club = self._get_club(club_id)
        with self.unit_of_work():
            if self.members.get_by_identity(data.identity_id, club.id) is not None:
                raise Conflict("This identity is already registered with the club")
            stamp = utcnow()
            try:
                member = self.members.create(Member(identity_id=data.identity_id, club_id=club.id,
                                                    full_name=data.full_name, access_flag=AccessFlag.pending.value,
                                                    created_at=stamp, updated_at=stamp))
            except IntegrityError as exc:
                raise Conflict("This identity is already registered with the club") from exc
            self.audit.record_for(actor, "member_provisioned", "member", member.id,
                                  {"identity_id": member.identity_id}, club_id=club.id, )
        return MemberResponse.model_validate(member)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_club(self, actor: Actor, club_id: int) -> ClubResponse:
        return ClubResponse.model_validate(guard.visible(actor, self.repository.get_by_id(club_id)))

    def list_clubs(self, actor: Actor) -> list[ClubResponse]:
        statement = guard.scope(select(Club), Club, actor)
        return [ClubResponse.model_validate(c) for c in self.repository.list(statement)]

    def get_member(self, actor: Actor, member_id: int) -> MemberResponse:
        return MemberResponse.model_validate(guard.visible(actor, self.members.get_by_id(member_id)))

    def list_members(self, actor: Actor, club_id: int) -> list[MemberResponse]:
        guard.require_role(actor, Role.admin, Role.coach)
        club = guard.visible(actor, self.repository.get_by_id(club_id))
        statement = guard.scope(select(Member), Member, actor).where(Member.club_id == club.id)
        return [MemberResponse.model_validate(m) for m in self.members.list(statement)]

    def _get_club(self, club_id: int) -> Club:
        club = self.repository.get_by_id(club_id)
        if club is None:
            raise NotFound()
        return club
