"""Tests for the leave request processor and its effect on attendance."""

import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from conftest import admin_actor, coach_actor, make_record, make_session, member_actor

from app.core.exceptions import (AlreadyCheckedIn, AlreadyReviewed, DuplicateRequest, Forbidden, LeadTimeViolation,
                                 MembershipInactive, NotAvailable, SessionCancelled, ValidationError, )
from app.core.clock import fixed
from app.membership.transitions import LeaveDecision
from app.models.attendance import AttendanceRecord, AttendanceStatus, CheckInMethod
from app.models.audit_log import AuditLogEntry
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.models.training_session import SessionStatus
from app.schemas.attendance import AttendanceMark
from app.schemas.leave_request import LeaveRequestCreate, LeaveReview
from app.services.attendance_service import AttendanceService
from app.services.leave_request_service import LeaveRequestService

# ======================================================================
# Helpers
# ======================================================================


def _records(db, session_id, member_id):
    statement = select(AttendanceRecord).where(AttendanceRecord.session_id == session_id,
                                               AttendanceRecord.member_id == member_id)
    return db.exec(statement).all()


def _leave_audit(db):
    return db.exec(select(AuditLogEntry).where(AuditLogEntry.entity_type == "leave_request")).all()


@pytest.fixture
def service(db, clock):
    return LeaveRequestService(db, clock)


@pytest.fixture
def training(db, world):
    # 2025-03-01 10:00-11:00, two days after the fixed clock.
    return make_session(db, world.coach_x)


@pytest.fixture
def requested(service, training, world):
    return service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=training.id,
                                                                                 reason="illness"))


# ======================================================================
# request_leave
# ======================================================================


class TestRequestLeave:
    def test_creates_pending_request(self, db, requested, world):
        assert requested.status == LeaveStatus.pending
        assert requested.reason == "illness"
        assert requested.requested_by == "member-x"
        assert requested.club_id == world.club_x.id
        assert len(_leave_audit(db)) == 1

    def test_duplicate_pending(self, service, requested, training, world):
        with pytest.raises(DuplicateRequest):
            service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=training.id,
                                                                                  reason="still ill"))

    def test_already_checked_in(self, db, clock, service, training, world):
        """Member checks in to a session, then a leave request for it fails."""
        AttendanceService(db, clock).check_in(member_actor(world.member_x), training.id)
        with pytest.raises(AlreadyCheckedIn):
            service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=training.id,
                                                                                  reason="illness"))

    def test_checked_in_wins_over_duplicate(self, db, requested, service, training, world):
        make_record(db, training, world.member_x, AttendanceStatus.present)
        with pytest.raises(AlreadyCheckedIn):
            service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=training.id,
                                                                                  reason="illness"))

    def test_blank_reason(self, service, training, world):
        with pytest.raises(ValidationError):
            service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=training.id,
                                                                                  reason="   "))

    def test_cancelled_session(self, db, service, world):
        cancelled = make_session(db, world.coach_x, status=SessionStatus.cancelled.value)
        with pytest.raises(SessionCancelled):
            service.request_leave(member_actor(world.member_x), LeaveRequestCreate(session_id=cancelled.id,
                                                                                  reason="illness"))

    @pytest.mark.parametrize("now,allowed", [
        (datetime.datetime(2025, 3, 1, 7, 59), True),
        (datetime.datetime(2025, 3, 1, 8, 0), True),
        (datetime.datetime(2025, 3, 1, 8, 1), False),
        (datetime.datetime(2025, 3, 1, 10, 30), False),
    ])
    def test_notice_window(self, db, training, world, now, allowed):
        service = LeaveRequestService(db, fixed(now))
        data = LeaveRequestCreate(session_id=training.id, reason="illness")
        if allowed:
            assert service.request_leave(member_actor(world.member_x), data).status == LeaveStatus.pending
        else:
            with pytest.raises(LeadTimeViolation):
                service.request_leave(member_actor(world.member_x), data)

    def test_inactive_member(self, service, training, world):
        with pytest.raises(MembershipInactive):
            service.request_leave(member_actor(world.newcomer_x), LeaveRequestCreate(session_id=training.id,
                                                                                    reason="illness"))

    def test_other_club_session(self, service, training, world):
        with pytest.raises(NotAvailable):
            service.request_leave(member_actor(world.member_y), LeaveRequestCreate(session_id=training.id,
                                                                                  reason="illness"))

    def test_partial_index_allows_one_pending(self, db, training, world):
        for _ in range(2):
            db.add(LeaveRequest(session_id=training.id, member_id=world.member_x.id, club_id=world.club_x.id,
                                reason="illness", requested_by="member-x", status="pending"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()


# ======================================================================
# review
# ======================================================================


class TestReview:
    def test_approve_creates_excused_record(self, db, service, requested, training, world):
        response = service.review(coach_actor(world.coach_x), requested.id, LeaveReview(decision="approve"))
        assert response.status == LeaveStatus.approved
        assert response.reviewed_by == "coach-x"
        assert response.reviewed_at is not None

        [record] = _records(db, training.id, world.member_x.id)
        assert record.status == AttendanceStatus.excused
        assert record.check_in_method == CheckInMethod.auto
        assert "illness" in record.notes

        entries = sorted(_leave_audit(db), key=lambda e: e.id)
        assert [e.action_type for e in entries] == ["leave_requested", "leave_approved"]
        assert entries[-1].details["attendance_created"] is True

    def test_approve_then_mark_updates_same_record(self, db, clock, service, requested, training, world):
        """Leave for illness approved, then a later mark updates the excused record in place."""
        service.review(coach_actor(world.coach_x), requested.id, LeaveReview(decision=LeaveDecision.approve))
        AttendanceService(db, clock).mark_attendance(coach_actor(world.coach_x), training.id,
                                                     AttendanceMark(member_id=world.member_x.id, status="present"))
        [record] = _records(db, training.id, world.member_x.id)
        assert record.status == AttendanceStatus.present

    def test_approve_with_existing_record_changes_nothing(self, db, service, requested, training, world):
        make_record(db, training, world.member_x, AttendanceStatus.absent, notes="No show")
        service.review(coach_actor(world.coach_x), requested.id, LeaveReview(decision="approve"))

        [record] = _records(db, training.id, world.member_x.id)
        assert record.status == AttendanceStatus.absent
        assert record.notes == "No show"
        assert _leave_audit(db)[-1].details["attendance_created"] is False

    def test_reject_leaves_attendance_untouched(self, db, service, requested, training, world):
        response = service.review(coach_actor(world.coach_x), requested.id,
                                  LeaveReview(decision="reject", notes="Competition week"))
        assert response.status == LeaveStatus.rejected
        assert response.review_notes == "Competition week"
        assert _records(db, training.id, world.member_x.id) == []

    def test_second_review(self, service, requested, world):
        service.review(coach_actor(world.coach_x), requested.id, LeaveReview(decision="reject"))
        with pytest.raises(AlreadyReviewed):
            service.review(admin_actor(), requested.id, LeaveReview(decision="approve"))

    def test_only_session_owner(self, service, requested, world):
        colleague = coach_actor(world.coach_x).model_copy(update={"coach_id": world.coach_x.id + 100})
        with pytest.raises(Forbidden):
            service.review(colleague, requested.id, LeaveReview(decision="approve"))

    def test_other_club_coach(self, service, requested, world):
        with pytest.raises(NotAvailable):
            service.review(coach_actor(world.coach_y), requested.id, LeaveReview(decision="approve"))

    def test_member_cannot_review(self, service, requested, world):
        with pytest.raises(Forbidden):
            service.review(member_actor(world.member_x), requested.id, LeaveReview(decision="approve"))


# ======================================================================
# Queries
# ======================================================================


class TestQueries:
    def test_list_for_session(self, service, requested, training, world):
        rows = service.list_for_session(coach_actor(world.coach_x), training.id)
        assert [r.id for r in rows] == [requested.id]

    def test_list_for_member(self, service, requested, world):
        assert [r.id for r in service.list_for_member(member_actor(world.member_x), world.member_x.id)] == [
            requested.id]
        assert service.list_for_member(coach_actor(world.coach_x), world.member_x.id, LeaveStatus.approved) == []

    def test_get_is_scoped(self, service, requested, world):
        assert service.get(member_actor(world.member_x), requested.id).id == requested.id
        with pytest.raises(NotAvailable):
            service.get(coach_actor(world.coach_y), requested.id)
