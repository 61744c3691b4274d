"""
Membership application endpoints.

Submission and resubmission by members, review by coaches, and the
access-status check the client uses to decide where to send a member.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_clock, get_current_actor
from app.core.clock import Clock
from app.db.session import get_db
from app.models.application import ApplicationStatus
from app.schemas.actor import Actor
from app.schemas.application import (AccessStatusResponse, ApplicationResponse, ApplicationResubmit,
                                     ApplicationReview, ApplicationSubmit, )
from app.services.application_service import ApplicationService

router = APIRouter()


@router.post("", summary="Submit a membership application.", response_model=ApplicationResponse,
             status_code=status.HTTP_201_CREATED, )
def submit_application(data: ApplicationSubmit, db: Session = Depends(get_db),
                       actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return ApplicationService(db, clock).submit(actor, data)


@router.get("/access-status", summary="Whether the current member may use club features.",
            response_model=AccessStatusResponse, )
def access_status(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ApplicationService(db).access_status(actor)


@router.get("/mine", summary="List the current member's applications.", response_model=list[ApplicationResponse], )
def my_applications(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ApplicationService(db).list_for_member(actor)


@router.get("/club/{club_id}", summary="List a club's applications.", response_model=list[ApplicationResponse], )
def club_applications(club_id: int, status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
                      db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ApplicationService(db).list_for_club(actor, club_id, status_filter)


@router.get("/{application_id}", summary="Get an application.", response_model=ApplicationResponse, )
def get_application(application_id: int, db: Session = Depends(get_db),
                    actor: Actor = Depends(get_current_actor), ):
    return ApplicationService(db).get(actor, application_id)


@router.post("/{application_id}/review", summary="Approve, reject or ask for more information.",
             response_model=ApplicationResponse, )
def review_application(application_id: int, data: ApplicationReview, db: Session = Depends(get_db),
                       actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return ApplicationService(db, clock).review(actor, application_id, data)


@router.post("/{application_id}/resubmit", summary="Answer an information request.",
             response_model=ApplicationResponse, )
def resubmit_application(application_id: int, data: ApplicationResubmit, db: Session = Depends(get_db),
                         actor: Actor = Depends(get_current_actor), clock: Clock = Depends(get_clock), ):
    return ApplicationService(db, clock).resubmit(actor, application_id, data)
