"""
Leave request endpoints.

Creating a request accepts an ``Idempotency-Key`` header so a client retry
returns the first response instead of a duplicate-request error.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.dependencies import get_clock, get_current_actor
from app.api.idempotency import Idempotency, IdempotentCall
from app.core.clock import Clock
from app.db.session import get_db
from app.schemas.actor import Actor
from app.schemas.leave_request import LeaveRequestCreate, LeaveRequestResponse, LeaveReview
from app.services.leave_request_service import LeaveRequestService

router = APIRouter()


@router.post("", summary="Request leave from a session.", response_model=LeaveRequestResponse,
             status_code=status.HTTP_201_CREATED, )
def request_leave(data: LeaveRequestCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor),
                  clock: Clock = Depends(get_clock),
                  call: IdempotentCall = Depends(Idempotency("leave-requests:create")), ):
    cached = call.replay(data)
    if cached is not None:
        return cached
    result = LeaveRequestService(db, clock).request_leave(actor, data)
    call.remember(result)
    return result


@router.get("/{request_id}", summary="Get a leave request.", response_model=LeaveRequestResponse, )
def get_leave_request(request_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return LeaveRequestService(db).get(actor, request_id)


@router.post("/{request_id}/review", summary="Approve or reject a leave request.",
             response_model=LeaveRequestResponse, )
def review_leave_request(request_id: int, data: LeaveReview, db: Session = Depends(get_db),
                         actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return LeaveRequestService(db, clock).review(actor, request_id, data)
