"""
Shared API dependencies.

Reusable FastAPI dependencies for identity resolution, the clock and
database access.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.clock import Clock, now
from app.core.security import bearer_scheme, decode_access_token
from app.db.repositories.club import CoachRepository, MemberRepository
from app.db.session import get_db
from app.schemas.actor import Actor, Role


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail,
                         headers={"WWW-Authenticate": "Bearer"}, )


def get_clock() -> Clock:
    """Business clock; overridden in tests."""
    return now


def get_current_actor(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
                      db: Session = Depends(get_db), ) -> Actor:
    """Build the :class:`Actor` from the identity provider's bearer token.

    Coaches and members are resolved to their rows; the row's club wins
    over the token's ``club_id`` claim.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    claims = decode_access_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        raise _unauthorized("Invalid or expired token")

    identity_id = str(claims["sub"])
    try:
        role = Role(claims.get("role"))
    except ValueError:
        raise _unauthorized("Unknown role")
    club_id = claims.get("club_id")

    if role == Role.admin:
        return Actor(identity_id=identity_id, role=role, club_id=club_id)

    if role == Role.coach:
        coach = CoachRepository(db).get_by_identity(identity_id)
        if coach is None:
            raise _unauthorized("Coach not found")
        return Actor(identity_id=identity_id, role=role, club_id=coach.club_id, coach_id=coach.id)

    member = MemberRepository(db).get_by_identity(identity_id, club_id)
    if member is None:
        # Not provisioned yet: can only ask for its access status.
        return Actor(identity_id=identity_id, role=role, club_id=club_id)
    return Actor(identity_id=identity_id, role=role, club_id=member.club_id, member_id=member.id)
