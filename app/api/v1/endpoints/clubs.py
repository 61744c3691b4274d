"""
Club administration endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.dependencies import get_current_actor
from app.db.session import get_db
from app.schemas.actor import Actor
from app.schemas.club import (ClubCreate, ClubResponse, CoachCreate, CoachResponse, MemberProvision,
                              MemberResponse, )
from app.services.club_service import ClubService

router = APIRouter()


@router.post("", summary="Create a club.", response_model=ClubResponse, status_code=status.HTTP_201_CREATED, )
def create_club(data: ClubCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).create_club(actor, data)


@router.get("", summary="List visible clubs.", response_model=list[ClubResponse], )
def list_clubs(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).list_clubs(actor)


@router.get("/{club_id}", summary="Get a club.", response_model=ClubResponse, )
def get_club(club_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).get_club(actor, club_id)


@router.post("/{club_id}/coaches", summary="Add a coach to a club.", response_model=CoachResponse,
             status_code=status.HTTP_201_CREATED, )
def add_coach(club_id: int, data: CoachCreate, db: Session = Depends(get_db),
              actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).add_coach(actor, club_id, data)


@router.post("/{club_id}/members", summary="Provision a member identity for a club.",
             response_model=MemberResponse, status_code=status.HTTP_201_CREATED, )
def provision_member(club_id: int, data: MemberProvision, db: Session = Depends(get_db),
                     actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).provision_member(actor, club_id, data)


@router.get("/{club_id}/members", summary="List members of a club.", response_model=list[MemberResponse], )
def list_members(club_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ):
    return ClubService(db).list_members(actor, club_id)
