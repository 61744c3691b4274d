"""
Training session endpoints.

Scheduling, editing and cancellation by the owning coach, plus the
attendance and leave views of a single session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_clock, get_current_actor
from app.api.idempotency import Idempotency, IdempotentCall
from app.core.clock import Clock
from app.db.session import get_db
from app.schemas.actor import Actor
from app.schemas.attendance import AttendanceMark, AttendanceResponse, CheckInRequest
from app.schemas.leave_request import LeaveRequestResponse
from app.schemas.training_session import TrainingSessionCreate, TrainingSessionResponse, TrainingSessionUpdate
from app.services.attendance_service import AttendanceService
from app.services.leave_request_service import LeaveRequestService
from app.services.training_session_service import TrainingSessionService

router = APIRouter()


@router.post("", summary="Schedule a training session.", response_model=TrainingSessionResponse,
             status_code=status.HTTP_201_CREATED, )
def create_session(data: TrainingSessionCreate, db: Session = Depends(get_db),
                   actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return TrainingSessionService(db, clock).create(actor, data)


@router.get("/club/{club_id}", summary="List a club's sessions.", response_model=list[TrainingSessionResponse], )
def list_sessions(club_id: int, upcoming: bool = Query(False, description="Only scheduled sessions from today"),
                  db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor),
                  clock: Clock = Depends(get_clock), ):
    return TrainingSessionService(db, clock).list_for_club(actor, club_id, upcoming)


@router.get("/{session_id}", summary="Get a training session.", response_model=TrainingSessionResponse, )
def get_session(session_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return TrainingSessionService(db).get(actor, session_id)


@router.put("/{session_id}", summary="Edit a training session.", response_model=TrainingSessionResponse, )
def update_session(session_id: int, data: TrainingSessionUpdate, db: Session = Depends(get_db),
                   actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return TrainingSessionService(db, clock).update(actor, session_id, data)


@router.post("/{session_id}/cancel", summary="Cancel a training session.", response_model=TrainingSessionResponse, )
def cancel_session(session_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor),
                   clock: Clock = Depends(get_clock), ):
    return TrainingSessionService(db, clock).cancel(actor, session_id)


# ----------------------------------------------------------------------
# Attendance
# ----------------------------------------------------------------------


@router.put("/{session_id}/attendance", summary="Mark a member's attendance.", response_model=AttendanceResponse, )
def mark_attendance(session_id: int, data: AttendanceMark, db: Session = Depends(get_db),
                    actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return AttendanceService(db, clock).mark_attendance(actor, session_id, data)


@router.get("/{session_id}/attendance", summary="List attendance for a session.",
            response_model=list[AttendanceResponse], )
def session_attendance(session_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return AttendanceService(db).list_for_session(actor, session_id)


@router.post("/{session_id}/check-in", summary="Check in to a session.", response_model=AttendanceResponse, )
def check_in(session_id: int, data: Optional[CheckInRequest] = None, db: Session = Depends(get_db),
             actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock),
             call: IdempotentCall = Depends(Idempotency("sessions:check-in")), ):
    cached = call.replay({"session_id": session_id, "check_in": data})
    if cached is not None:
        return cached
    result = AttendanceService(db, clock).check_in(actor, session_id, data)
    call.remember(result)
    return result


@router.get("/{session_id}/leave-requests", summary="List leave requests for a session.",
            response_model=list[LeaveRequestResponse], )
def session_leave_requests(session_id: int, db: Session = Depends(get_db),
                           actor: Actor = Depends(get_current_actor), ):
    return LeaveRequestService(db).list_for_session(actor, session_id)
