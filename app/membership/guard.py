"""
Authorization guard.

Every service calls into this module before it reads or writes a row:

- ``authorize``: decide whether an actor may read/write one entity,
- ``scope``: the one place list queries get their club/member filter,
- ``require_role`` / ``require_session_owner``: role-level preconditions.

Rules
-----

1. An administrator may act on any club.
2. A coach may act only on entities of their own club.
3. A member may read/write entities they own (``member_id`` matches, or the
   member row itself) and may *read* club-wide entities (sessions) of their
   own club.

Denials raise :class:`~app.core.exceptions.Forbidden`, which the API renders
exactly like a missing row.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from loguru import logger

from app.core.exceptions import Forbidden, NotFound
from app.models.club import Club
from app.models.member import Member
from app.models.training_session import TrainingSession
from app.schemas.actor import Actor, Role


class Action(str, Enum):
    read = "read"
    write = "write"


# ======================================================================
# Entity inspection
# ======================================================================


def _club_of(entity: Any) -> Optional[int]:
    if isinstance(entity, Club):
        return entity.id
    return getattr(entity, "club_id", None)


def _owner_of(entity: Any) -> Optional[int]:
    """Member id owning ``entity``, or None for club-wide entities."""
    if isinstance(entity, Member):
        return entity.id
    return getattr(entity, "member_id", None)


def _is_member_owned(entity: Any) -> bool:
    return isinstance(entity, Member) or hasattr(entity, "member_id")


def _is_allowed(actor: Actor, entity: Any, action: Action) -> bool:
    if actor.is_admin:
        return True

    club_id = _club_of(entity)
    if club_id is None or actor.club_id is None or club_id != actor.club_id:
        return False

    if actor.is_coach:
        return True

    if actor.is_member:
        if _is_member_owned(entity):
            return actor.member_id is not None and _owner_of(entity) == actor.member_id
        # Club-wide entities are read-only for members.
        return action == Action.read

    return False


# ======================================================================
# Public API
# ======================================================================


def authorize(actor: Actor, entity: Any, action: Action = Action.read) -> None:
    """Raise ``Forbidden`` unless ``actor`` may perform ``action`` on ``entity``."""
    if not _is_allowed(actor, entity, action):
        logger.warning("Denied {} on {} for {} ({})", action.value, type(entity).__name__, actor.identity_id,
                       actor.role.value)
        raise Forbidden()


def visible(actor: Actor, entity: Any, action: Action = Action.read) -> Any:
    """Return ``entity`` if it exists and the actor may act on it.

    A missing row raises ``NotFound`` and an out-of-scope row ``Forbidden``;
    both carry the same public message.
    """
    if entity is None:
        raise NotFound()
    authorize(actor, entity, action)
    return entity


def require_role(actor: Actor, *roles: Role) -> None:
    if actor.role not in roles:
        logger.warning("Role {} not in {} for {}", actor.role.value, [r.value for r in roles], actor.identity_id)
        raise Forbidden()


def require_session_owner(actor: Actor, session: TrainingSession) -> None:
    """Administrators, or the coach who owns ``session``."""
    if actor.is_admin:
        return
    if (actor.is_coach and actor.coach_id is not None and session.coach_id == actor.coach_id
            and session.club_id == actor.club_id):
        return
    logger.warning("Session {} is not owned by {}", session.id, actor.identity_id)
    raise Forbidden()


def scope(statement, model: type, actor: Actor):
    """Apply the actor's club (and, for members, ownership) filter to a select.

    Administrators are unfiltered.  A non-admin actor without a club sees
    nothing.
    """
    if actor.is_admin:
        return statement

    club_column = model.id if model is Club else model.club_id
    statement = statement.where(club_column == actor.club_id)

    if actor.is_member:
        if model is Member:
            statement = statement.where(Member.id == actor.member_id)
        elif hasattr(model, "member_id"):
            statement = statement.where(model.member_id == actor.member_id)
    return statement
