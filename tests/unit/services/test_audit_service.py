"""Tests for the audit recorder: ordering, filtering and scoping."""

import datetime

import pytest

from conftest import admin_actor, coach_actor, make_session, member_actor

from app.core.clock import fixed
from app.core.exceptions import Forbidden, NotAvailable
from app.membership.transitions import LeaveDecision
from app.schemas.attendance import AttendanceMark
from app.schemas.audit import AuditQuery
from app.schemas.leave_request import LeaveRequestCreate, LeaveReview
from app.services.attendance_service import AttendanceService
from app.services.audit_service import AuditRecorder
from app.services.leave_request_service import LeaveRequestService

# ======================================================================
# Helpers
# ======================================================================


class SteppingClock:
    """Returns the given moments in order, then keeps returning the last."""

    def __init__(self, *moments):
        self.moments = list(moments)

    def __call__(self):
        if len(self.moments) > 1:
            return self.moments.pop(0)
        return self.moments[0]


def _record(recorder, action_type, club_id=None, actor_id="admin-1"):
    return recorder.record(actor_id, "admin", action_type, "club", 1, {"k": "v"}, club_id=club_id)


# ======================================================================
# record
# ======================================================================


class TestRecord:
    def test_assigns_server_timestamp(self, db):
        moment = datetime.datetime(2025, 2, 27, 2, 0)
        entry = _record(AuditRecorder(db, fixed(moment)), "club_created")
        assert entry.created_at == moment
        assert entry.id is not None

    def test_timestamp_never_goes_backwards(self, db):
        later = datetime.datetime(2025, 2, 27, 12, 0)
        earlier = datetime.datetime(2025, 2, 27, 11, 0)
        recorder = AuditRecorder(db, SteppingClock(later, earlier))
        first = _record(recorder, "a")
        second = _record(recorder, "b")
        assert second.created_at >= first.created_at

    def test_participates_in_caller_transaction(self, db):
        recorder = AuditRecorder(db)
        _record(recorder, "rolled_back")
        db.rollback()
        assert recorder.count(admin_actor()) == 0

    def test_queues_notification_event(self, db):
        recorder = AuditRecorder(db)
        _record(recorder, "club_created", club_id=3)
        [event] = recorder.drain()
        assert (event.entity_type, event.action_type, event.club_id) == ("club", "club_created", 3)
        assert recorder.drain() == []


# ======================================================================
# query
# ======================================================================


class TestQuery:
    def test_newest_first_with_id_tiebreak(self, db):
        moment = datetime.datetime(2025, 2, 27, 9, 0)
        recorder = AuditRecorder(db, fixed(moment))
        ids = [_record(recorder, f"action_{i}").id for i in range(4)]
        db.commit()
        entries = recorder.query(admin_actor())
        assert [e.id for e in entries] == list(reversed(ids))

    def test_filters(self, db):
        recorder = AuditRecorder(db)
        _record(recorder, "club_created", actor_id="admin-1")
        _record(recorder, "coach_added", actor_id="admin-2")
        db.commit()
        assert [e.action_type for e in recorder.query(admin_actor(), AuditQuery(actor_id="admin-2"))] == [
            "coach_added"]
        assert recorder.count(admin_actor(), AuditQuery(action_type="club_created")) == 1
        assert recorder.count(admin_actor(), AuditQuery(entity_type="session")) == 0

    def test_time_range(self, db):
        recorder = AuditRecorder(db, SteppingClock(datetime.datetime(2025, 1, 1), datetime.datetime(2025, 2, 1),
                                                   datetime.datetime(2025, 3, 1)))
        for name in ("jan", "feb", "mar"):
            _record(recorder, name)
        db.commit()
        window = AuditQuery(start=datetime.datetime(2025, 1, 15), end=datetime.datetime(2025, 2, 15))
        assert [e.action_type for e in recorder.query(admin_actor(), window)] == ["feb"]

    def test_limit_and_offset(self, db):
        recorder = AuditRecorder(db)
        for i in range(5):
            _record(recorder, f"action_{i}")
        db.commit()
        page = recorder.page(admin_actor(), AuditQuery(limit=2, offset=1))
        assert page.total == 5
        assert len(page.entries) == 2

    def test_coach_sees_own_club_only(self, db, world):
        recorder = AuditRecorder(db)
        _record(recorder, "x_event", club_id=world.club_x.id)
        _record(recorder, "y_event", club_id=world.club_y.id)
        db.commit()
        assert [e.action_type for e in recorder.query(coach_actor(world.coach_x))] == ["x_event"]

    def test_members_denied(self, db, world):
        with pytest.raises(Forbidden):
            AuditRecorder(db).query(member_actor(world.member_x))


# ======================================================================
# One entry per mutation, ordered
# ======================================================================


class TestOperationTrail:
    def test_every_mutation_writes_one_entry(self, db, clock, world):
        coach = coach_actor(world.coach_x)
        member = member_actor(world.member_x)
        training = make_session(db, world.coach_x)
        leave = LeaveRequestService(db, clock)
        attendance = AttendanceService(db, clock)
        recorder = AuditRecorder(db)

        request = leave.request_leave(member, LeaveRequestCreate(session_id=training.id, reason="illness"))
        assert recorder.count(admin_actor()) == 1
        leave.review(coach, request.id, LeaveReview(decision=LeaveDecision.approve))
        assert recorder.count(admin_actor()) == 2
        attendance.mark_attendance(coach, training.id, AttendanceMark(member_id=world.member_x.id,
                                                                      status="present"))
        assert recorder.count(admin_actor()) == 3

        entries = recorder.query(admin_actor())
        assert [e.action_type for e in entries] == ["attendance_updated", "leave_approved", "leave_requested"]
        stamps = [e.created_at for e in entries]
        assert stamps == sorted(stamps, reverse=True)

    def test_failed_operation_writes_nothing(self, db, clock, world):
        training = make_session(db, world.coach_x)
        with pytest.raises(NotAvailable):
            AttendanceService(db, clock).mark_attendance(coach_actor(world.coach_y), training.id,
                                                         AttendanceMark(member_id=world.member_x.id,
                                                                        status="present"))
        assert AuditRecorder(db).count(admin_actor()) == 0
