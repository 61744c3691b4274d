"""
Attendance ledger service.

One record per (session, member), written with an atomic upsert.  Coaches
mark attendance manually; members check themselves in.  Statistics are
recomputed from the ledger on every read.
"""

from typing import Optional

from loguru import logger
from sqlmodel import Session, select

from app.core.clock import Clock, now, utcnow
from app.core.exceptions import MembershipInactive, NotFound, SessionCancelled, ValidationError
from app.db.repositories.attendance import AttendanceRepository
from app.db.repositories.club import MemberRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.membership import guard
from app.membership.guard import Action
from app.membership.statistics import compute_attendance_stats
from app.models.attendance import AttendanceRecord, AttendanceStatus, CheckInMethod
from app.models.member import AccessFlag, Member
from app.models.training_session import TrainingSession
from app.schemas.actor import Actor, Role
from app.schemas.attendance import AttendanceMark, AttendanceResponse, AttendanceStats, CheckInRequest
from app.services.base import BaseService
from app.services.notification_service import NotificationDispatcher

ENTITY = "attendance_record"


def ensure_active(member: Member) -> None:
    if member.access_flag != AccessFlag.active:
        raise MembershipInactive()


class AttendanceService(BaseService):
    """Service for attendance business logic."""

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(session, clock, dispatcher)
        self.repository = AttendanceRepository(session)
        self.sessions = TrainingSessionRepository(session)
        self.members = MemberRepository(session)

    # ==================================================================
    # Recording
    # ==================================================================

    def mark_attendance(self, actor: Actor, session_id: int, data: AttendanceMark) -> AttendanceResponse:
        """Coach-side upsert of one member's attendance for a session.

        A manual mark never sets ``check_in_time``; a time already recorded
        by self check-in is kept.
        """
        entry = self._open_session(actor, session_id, Action.write)
        guard.require_session_owner(actor, entry)

        member = self.members.get_by_id(data.member_id)
        if member is None or member.club_id != entry.club_id:
            raise NotFound()
        ensure_active(member)

        with self.unit_of_work():
            existing = self.repository.get_by_pair(entry.id, member.id)
            old_status = existing.status if existing else None
            stamp = utcnow()
            values = {"session_id": entry.id, "member_id": member.id, "club_id": entry.club_id,
                      "status": data.status.value, "check_in_time": None,
                      "check_in_method": CheckInMethod.manual.value, "marked_by": actor.identity_id,
                      "notes": data.notes, "created_at": stamp, "updated_at": stamp, }
            record = self.repository.upsert(values, ["status", "check_in_method", "marked_by", "notes",
                                                     "updated_at"])
            self.audit.record_for(actor, "attendance_updated" if existing else "attendance_marked", ENTITY,
                                  record.id, {"session_id": entry.id, "member_id": member.id,
                                              "status": data.status.value,
                                              "old_status": old_status},
                                  club_id=entry.club_id, )

        logger.info("Attendance {} for member {} in session {}", data.status.value, member.id, entry.id)
        return self._to_response(record)

    def check_in(self, actor: Actor, session_id: int, data: Optional[CheckInRequest] = None) -> AttendanceResponse:
        """Member self check-in: records ``present`` with the current time."""
        guard.require_role(actor, Role.member)
        data = data or CheckInRequest()
        if data.method == CheckInMethod.auto:
            raise ValidationError("Automatic check-in is reserved for approved leave")

        entry = self._open_session(actor, session_id, Action.read)
        member = self.members.get_by_id(actor.member_id) if actor.member_id is not None else None
        member = guard.visible(actor, member, Action.write)
        ensure_active(member)

        with self.unit_of_work():
            existing = self.repository.get_by_pair(entry.id, member.id)
            old_status = existing.status if existing else None
            stamp = utcnow()
            values = {"session_id": entry.id, "member_id": member.id, "club_id": entry.club_id,
                      "status": AttendanceStatus.present.value, "check_in_time": self.clock(),
                      "check_in_method": data.method.value, "marked_by": actor.identity_id, "notes": None,
                      "created_at": stamp, "updated_at": stamp, }
            record = self.repository.upsert(values, ["status", "check_in_time", "check_in_method", "marked_by",
                                                     "updated_at"])
            self.audit.record_for(actor, "attendance_checked_in", ENTITY, record.id,
                                  {"session_id": entry.id, "member_id": member.id, "method": data.method.value,
                                   "old_status": old_status}, club_id=entry.club_id, )

        logger.info("Member {} checked in to session {} via {}", member.id, entry.id, data.method.value)
        return self._to_response(record)

    # ==================================================================
    # Queries
    # ==================================================================

    def list_for_session(self, actor: Actor, session_id: int) -> list[AttendanceResponse]:
        guard.require_role(actor, Role.admin, Role.coach)
        entry = guard.visible(actor, self.sessions.get_by_id(session_id))
        return [self._to_response(r) for r in self.repository.list_for_session(entry.id)]

    def list_for_member(self, actor: Actor, member_id: int) -> list[AttendanceResponse]:
        member = guard.visible(actor, self.members.get_by_id(member_id))
        statement = guard.scope(select(AttendanceRecord), AttendanceRecord, actor).where(
            AttendanceRecord.member_id == member.id)
        return [self._to_response(r) for r in self.repository.list(statement)]

    def member_statistics(self, actor: Actor, member_id: int) -> AttendanceStats:
        member = guard.visible(actor, self.members.get_by_id(member_id))
        rows = self.repository.status_and_dates_for_member(member.id)
        return compute_attendance_stats(rows, self.clock().date())

    # ==================================================================
    # Helpers
    # ==================================================================

    def _open_session(self, actor: Actor, session_id: int, action: Action) -> TrainingSession:
        entry = guard.visible(actor, self.sessions.get_by_id(session_id), action)
        if entry.is_cancelled:
            raise SessionCancelled()
        return entry

    @staticmethod
    def _to_response(record: AttendanceRecord) -> AttendanceResponse:
        return AttendanceResponse.model_validate(record)
