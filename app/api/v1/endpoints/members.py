"""
Member endpoints.

Per-member views: profile, attendance history, statistics and leave history.
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.dependencies import get_clock, get_current_actor
from app.core.clock import Clock
from app.db.session import get_db
from app.schemas.actor import Actor
from app.schemas.attendance import AttendanceResponse, AttendanceStats
from app.schemas.club import MemberResponse
from app.schemas.leave_request import LeaveRequestResponse
from app.services.attendance_service import AttendanceService
from app.services.club_service import ClubService
from app.services.leave_request_service import LeaveRequestService

router = APIRouter()


@router.get("/{member_id}", summary="Get a member.", response_model=MemberResponse, )
def get_member(member_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).get_member(actor, member_id)


@router.get("/{member_id}/attendance", summary="A member's attendance history.",
            response_model=list[AttendanceResponse], )
def member_attendance(member_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return AttendanceService(db).list_for_member(actor, member_id)


@router.get("/{member_id}/statistics", summary="Attendance statistics, recomputed from the ledger.",
            response_model=AttendanceStats, )
def member_statistics(member_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor),
                      clock: Clock = Depends(get_clock), ):
    return AttendanceService(db, clock).member_statistics(actor, member_id)


@router.get("/{member_id}/leave-requests", summary="A member's leave requests.",
            response_model=list[LeaveRequestResponse], )
def member_leave_requests(member_id: int, db: Session = Depends(get_db),
                          actor: Actor = Depends(get_current_actor), ):
    return LeaveRequestService(db).list_for_member(actor, member_id)
