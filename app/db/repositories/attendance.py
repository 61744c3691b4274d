"""
Attendance repository.

Writes are keyed on (session_id, member_id).  PostgreSQL and SQLite use the
dialect's ``INSERT ... ON CONFLICT`` so the upsert is a single atomic
statement; any other backend falls back to check-then-act inside a savepoint
where a uniqueness violation is treated as "someone else inserted first".
"""

from __future__ import annotations

import datetime
from typing import Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.attendance import AttendanceRecord
from app.models.training_session import TrainingSession

_CONFLICT_KEY = ["session_id", "member_id"]
_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class AttendanceRepository:
    """Repository for AttendanceRecord database operations."""

    def __init__(self, session: Session):
        self.session = session

    def _dialect_insert(self):
        return _INSERTS.get(self.session.get_bind().dialect.name)

    def get_by_pair(self, session_id: int, member_id: int) -> Optional[AttendanceRecord]:
        statement = (select(AttendanceRecord).where(AttendanceRecord.session_id == session_id,
                                                    AttendanceRecord.member_id == member_id, ).execution_options(
            populate_existing=True))
        return self.session.exec(statement).first()

    def exists(self, session_id: int, member_id: int) -> bool:
        return self.get_by_pair(session_id, member_id) is not None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def upsert(self, values: dict, update_fields: list[str]) -> AttendanceRecord:
        """Insert ``values`` or, on (session, member) conflict, update ``update_fields``."""
        insert = self._dialect_insert()
        if insert is not None:
            statement = insert(AttendanceRecord.__table__).values(**values)
            statement = statement.on_conflict_do_update(index_elements=_CONFLICT_KEY, set_={
                field: getattr(statement.excluded, field) for field in update_fields}, )
            self.session.exec(statement)
        else:
            self._upsert_fallback(values, update_fields)
        return self.get_by_pair(values["session_id"], values["member_id"])

    def insert_if_absent(self, values: dict) -> bool:
        """Insert ``values`` unless a record exists; return True if inserted."""
        insert = self._dialect_insert()
        if insert is not None:
            statement = insert(AttendanceRecord.__table__).values(**values).on_conflict_do_nothing(index_elements=_CONFLICT_KEY)
            return self.session.exec(statement).rowcount == 1
        if self.exists(values["session_id"], values["member_id"]):
            return False
        try:
            with self.session.begin_nested():
                self.session.add(AttendanceRecord(**values))
        except IntegrityError:
            return False
        return True

    def _upsert_fallback(self, values: dict, update_fields: list[str]) -> None:
        existing = self.get_by_pair(values["session_id"], values["member_id"])
        if existing is None:
            try:
                with self.session.begin_nested():
                    self.session.add(AttendanceRecord(**values))
                return
            except IntegrityError:
                existing = self.get_by_pair(values["session_id"], values["member_id"])
        for field in update_fields:
            setattr(existing, field, values[field])
        self.session.add(existing)
        self.session.flush()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_for_session(self, session_id: int) -> list[AttendanceRecord]:
        statement = (select(AttendanceRecord).where(AttendanceRecord.session_id == session_id).order_by(
            AttendanceRecord.member_id))
        return list(self.session.exec(statement).all())

    def list(self, statement) -> list[AttendanceRecord]:
        return list(self.session.exec(statement.order_by(AttendanceRecord.created_at.desc(),
                                                         AttendanceRecord.id.desc())).all())

    def status_and_dates_for_member(self, member_id: int) -> list[tuple[str, datetime.date]]:
        """(status, session_date) pairs feeding the statistics projection."""
        statement = (select(AttendanceRecord.status, TrainingSession.session_date).join(TrainingSession,
                                                                                         TrainingSession.id == AttendanceRecord.session_id).where(
            AttendanceRecord.member_id == member_id))
        return [(row[0], row[1]) for row in self.session.exec(statement).all()]
