"""
Training session repository.

Handles database operations for :class:`TrainingSession`.
"""

from __future__ import annotations

import datetime
from typing import Optional

from sqlmodel import Session

from app.models.training_session import SessionStatus, TrainingSession


class TrainingSessionRepository:
    """Repository for TrainingSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.flush()
        self.session.refresh(entry)
        return entry

    def get_by_id(self, entry_id: int) -> Optional[TrainingSession]:
        return self.session.get(TrainingSession, entry_id)

    def list(self, statement, from_date: Optional[datetime.date] = None,
             include_cancelled: bool = True, ) -> list[TrainingSession]:
        if from_date is not None:
            statement = statement.where(TrainingSession.session_date >= from_date)
        if not include_cancelled:
            statement = statement.where(TrainingSession.status == SessionStatus.scheduled.value)
        statement = statement.order_by(TrainingSession.session_date, TrainingSession.start_time, TrainingSession.id)
        return list(self.session.exec(statement).all())

    def update(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.flush()
        self.session.refresh(entry)
        return entry
