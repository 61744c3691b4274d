"""
Leave request service.

A member asks to be excused from a session ahead of time; the session's
coach approves or rejects.  Approval writes an ``excused`` attendance record
only when none exists yet, so it can never duplicate or overwrite a
check-in or a coach's mark.
"""

import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.clock import Clock, now, utcnow
from app.core.config import settings
from app.core.exceptions import (AlreadyCheckedIn, AlreadyReviewed, DuplicateRequest, LeadTimeViolation, NotFound,
                                 SessionCancelled, ValidationError, )
from app.db.repositories.attendance import AttendanceRepository
from app.db.repositories.club import MemberRepository
from app.db.repositories.leave_request import LeaveRequestRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.membership import guard
from app.membership.guard import Action
from app.membership.transitions import (LEAVE_DECISION_TARGET, LEAVE_TRANSITIONS, REVIEWABLE_LEAVE, LeaveDecision,
                                        ensure_transition, )
from app.models.attendance import AttendanceStatus, CheckInMethod
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.schemas.actor import Actor, Role
from app.schemas.leave_request import LeaveRequestCreate, LeaveRequestResponse, LeaveReview
from app.services.attendance_service import ensure_active
from app.services.base import BaseService
from app.services.notification_service import NotificationDispatcher

ENTITY = "leave_request"


class LeaveRequestService(BaseService):
    """Service for leave request business logic."""

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(session, clock, dispatcher)
        self.repository = LeaveRequestRepository(session)
        self.attendance = AttendanceRepository(session)
        self.sessions = TrainingSessionRepository(session)
        self.members = MemberRepository(session)

    def request_leave(self, actor: Actor, data: LeaveRequestCreate) -> LeaveRequestResponse:
        guard.require_role(actor, Role.member)
        reason = data.reason.strip()
        if not reason:
            raise ValidationError("A reason is required")

        entry = guard.visible(actor, self.sessions.get_by_id(data.session_id))
        if entry.is_cancelled:
            raise SessionCancelled()
        notice = datetime.timedelta(hours=settings.LEAVE_NOTICE_HOURS)
        if entry.starts_at - self.clock() < notice:
            raise LeadTimeViolation(
                f"Leave must be requested at least {settings.LEAVE_NOTICE_HOURS:g} hours before the session")

        member = self.members.get_by_id(actor.member_id) if actor.member_id is not None else None
        member = guard.visible(actor, member, Action.write)
        ensure_active(member)

        with self.unit_of_work():
            if self.attendance.exists(entry.id, member.id):
                raise AlreadyCheckedIn()
            if self.repository.find_pending(entry.id, member.id) is not None:
                raise DuplicateRequest()

            stamp = utcnow()
            request = LeaveRequest(session_id=entry.id, member_id=member.id, club_id=entry.club_id, reason=reason,
                                   status=LeaveStatus.pending.value, requested_by=actor.identity_id,
                                   created_at=stamp, updated_at=stamp, )
            try:
                request = self.repository.create(request)
            except IntegrityError as exc:
                raise DuplicateRequest() from exc

            self.audit.record_for(actor, "leave_requested", ENTITY, request.id,
                                  {"session_id": entry.id, "member_id": member.id, "reason": reason},
                                  club_id=entry.club_id, )

        logger.info("Leave {} requested by member {} for session {}", request.id, member.id, entry.id)
        return self._to_response(request)

    def review(self, actor: Actor, request_id: int, data: LeaveReview) -> LeaveRequestResponse:
        guard.require_role(actor, Role.admin, Role.coach)
        request = guard.visible(actor, self.repository.get_by_id(request_id), Action.write)
        entry = self.sessions.get_by_id(request.session_id)
        if entry is None:
            raise NotFound()
        guard.require_session_owner(actor, entry)

        target = LEAVE_DECISION_TARGET[data.decision]
        ensure_transition(LEAVE_TRANSITIONS, request.status, target)

        notes = data.notes.strip() if data.notes else None
        with self.unit_of_work():
            stamp = utcnow()
            reviewed = self.repository.transition(request, REVIEWABLE_LEAVE, status=target.value,
                                                  reviewed_by=actor.identity_id, reviewed_at=stamp,
                                                  review_notes=notes or None, updated_at=stamp, )
            if not reviewed:
                raise AlreadyReviewed()

            attendance_created = False
            if data.decision == LeaveDecision.approve:
                attendance_created = self.attendance.insert_if_absent(
                    {"session_id": request.session_id, "member_id": request.member_id, "club_id": request.club_id,
                     "status": AttendanceStatus.excused.value, "check_in_time": None,
                     "check_in_method": CheckInMethod.auto.value, "marked_by": actor.identity_id,
                     "notes": f"Leave approved: {request.reason}", "created_at": stamp, "updated_at": stamp, })

            self.audit.record_for(actor, f"leave_{target.value}", ENTITY, request.id,
                                  {"old_status": LeaveStatus.pending.value, "new_status": target.value,
                                   "session_id": request.session_id, "member_id": request.member_id,
                                   "attendance_created": attendance_created}, club_id=request.club_id, )

        logger.info("Leave {} {} by {} (attendance created: {})", request.id, target.value, actor.identity_id,
                    attendance_created)
        return self._to_response(request)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, actor: Actor, request_id: int) -> LeaveRequestResponse:
        return self._to_response(guard.visible(actor, self.repository.get_by_id(request_id)))

    def list_for_session(self, actor: Actor, session_id: int,
                         status: Optional[LeaveStatus] = None) -> list[LeaveRequestResponse]:
        guard.require_role(actor, Role.admin, Role.coach)
        entry = guard.visible(actor, self.sessions.get_by_id(session_id))
        statement = guard.scope(select(LeaveRequest), LeaveRequest, actor).where(LeaveRequest.session_id == entry.id)
        return [self._to_response(r) for r in self.repository.list(statement, status)]

    def list_for_member(self, actor: Actor, member_id: int,
                        status: Optional[LeaveStatus] = None) -> list[LeaveRequestResponse]:
        member = guard.visible(actor, self.members.get_by_id(member_id))
        statement = guard.scope(select(LeaveRequest), LeaveRequest, actor).where(LeaveRequest.member_id == member.id)
        return [self._to_response(r) for r in self.repository.list(statement, status)]

    @staticmethod
    def _to_response(request: LeaveRequest) -> LeaveRequestResponse:
        return LeaveRequestResponse.model_validate(request)
