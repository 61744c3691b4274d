"""
Training session service.

Coaches schedule, edit and cancel sessions for their own club.  Date and
time-order rules depend on "now" and are checked here against the injected
clock; cancellation is only allowed while more than
``SESSION_CANCEL_LEAD_HOURS`` remain before the start.
"""

import datetime
from typing import Optional

from loguru import logger
from sqlmodel import Session, select

from app.core.clock import Clock, now, utcnow
from app.core.config import settings
from app.core.exceptions import LeadTimeViolation, NotFound, SessionCancelled, ValidationError
from app.db.repositories.club import ClubRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.membership import guard
from app.models.training_session import SessionStatus, TrainingSession
from app.schemas.actor import Actor, Role
from app.schemas.training_session import TrainingSessionCreate, TrainingSessionResponse, TrainingSessionUpdate
from app.services.base import BaseService
from app.services.notification_service import NotificationDispatcher

ENTITY = "training_session"


class TrainingSessionService(BaseService):
    """Service for training session business logic."""

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(session, clock, dispatcher)
        self.repository = TrainingSessionRepository(session)
        self.clubs = ClubRepository(session)

    def create(self, actor: Actor, data: TrainingSessionCreate) -> TrainingSessionResponse:
        guard.require_role(actor, Role.coach)
        if actor.coach_id is None or actor.club_id is None:
            raise NotFound()
        self._validate(data.title, data.location, data.session_date, data.start_time, data.end_time)

        with self.unit_of_work():
            stamp = utcnow()
            entry = TrainingSession(club_id=actor.club_id, coach_id=actor.coach_id, title=data.title.strip(),
                                    description=data.description, session_date=data.session_date,
                                    start_time=data.start_time, end_time=data.end_time,
                                    location=data.location.strip(), status=SessionStatus.scheduled.value,
                                    created_at=stamp, updated_at=stamp, )
            entry = self.repository.create(entry)
            self.audit.record_for(actor, "session_created", ENTITY, entry.id,
                                  {"title": entry.title, "session_date": entry.session_date.isoformat()},
                                  club_id=entry.club_id, )

        logger.info("Session {} scheduled for club {} on {}", entry.id, entry.club_id, entry.session_date)
        return self._to_response(entry)

    def update(self, actor: Actor, entry_id: int, data: TrainingSessionUpdate) -> TrainingSessionResponse:
        entry = self._get_owned_entry(actor, entry_id)
        if entry.is_cancelled:
            raise SessionCancelled()

        changes = data.model_dump(exclude_unset=True)
        merged = {field: changes.get(field, getattr(entry, field)) for field in
                  ("title", "location", "session_date", "start_time", "end_time")}
        self._validate(merged["title"], merged["location"], merged["session_date"], merged["start_time"],
                       merged["end_time"])

        with self.unit_of_work():
            for field, value in changes.items():
                setattr(entry, field, value.strip() if isinstance(value, str) else value)
            entry.updated_at = utcnow()
            entry = self.repository.update(entry)
            self.audit.record_for(actor, "session_updated", ENTITY, entry.id, {"fields": sorted(changes)},
                                  club_id=entry.club_id, )

        return self._to_response(entry)

    def cancel(self, actor: Actor, entry_id: int) -> TrainingSessionResponse:
        entry = self._get_owned_entry(actor, entry_id)
        if entry.is_cancelled:
            raise SessionCancelled()

        lead = datetime.timedelta(hours=settings.SESSION_CANCEL_LEAD_HOURS)
        remaining = entry.starts_at - self.clock()
        if remaining <= lead:
            raise LeadTimeViolation(
                f"Sessions can only be cancelled more than {settings.SESSION_CANCEL_LEAD_HOURS:g} hours before start")

        with self.unit_of_work():
            stamp = utcnow()
            entry.status = SessionStatus.cancelled.value
            entry.cancelled_at = stamp
            entry.updated_at = stamp
            entry = self.repository.update(entry)
            self.audit.record_for(actor, "session_cancelled", ENTITY, entry.id,
                                  {"session_date": entry.session_date.isoformat()}, club_id=entry.club_id, )

        logger.info("Session {} cancelled by {}", entry.id, actor.identity_id)
        return self._to_response(entry)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, actor: Actor, entry_id: int) -> TrainingSessionResponse:
        return self._to_response(guard.visible(actor, self.repository.get_by_id(entry_id)))

    def list_for_club(self, actor: Actor, club_id: int, upcoming: bool = False) -> list[TrainingSessionResponse]:
        guard.visible(actor, self.clubs.get_by_id(club_id))
        statement = guard.scope(select(TrainingSession), TrainingSession, actor).where(
            TrainingSession.club_id == club_id)
        from_date = self.clock().date() if upcoming else None
        entries = self.repository.list(statement, from_date=from_date, include_cancelled=not upcoming)
        return [self._to_response(e) for e in entries]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate(self, title: Optional[str], location: Optional[str], session_date: Optional[datetime.date],
                  start_time: Optional[datetime.time], end_time: Optional[datetime.time]) -> None:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not location or not location.strip():
            raise ValidationError("Location is required")
        if session_date is None or start_time is None or end_time is None:
            raise ValidationError("Session date, start time and end time are required")
        if session_date < self.clock().date():
            raise ValidationError("Session date cannot be in the past")
        if start_time >= end_time:
            raise ValidationError("Start time must be before end time")

    def _get_owned_entry(self, actor: Actor, entry_id: int) -> TrainingSession:
        entry = guard.visible(actor, self.repository.get_by_id(entry_id), guard.Action.write)
        guard.require_session_owner(actor, entry)
        return entry

    @staticmethod
    def _to_response(entry: TrainingSession) -> TrainingSessionResponse:
        return TrainingSessionResponse.model_validate(entry)
