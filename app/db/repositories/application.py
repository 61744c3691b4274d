"""
Membership application repository.

Status changes go through :meth:`ApplicationRepository.transition`, a
conditional UPDATE that only succeeds while the row is still in one of the
expected statuses.  Of two concurrent reviewers exactly one sees ``True``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.application import ApplicationStatus, MembershipApplication


class ApplicationRepository:
    """Repository for MembershipApplication database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, application: MembershipApplication) -> MembershipApplication:
        self.session.add(application)
        self.session.flush()
        self.session.refresh(application)
        return application

    def get_by_id(self, application_id: int) -> Optional[MembershipApplication]:
        return self.session.get(MembershipApplication, application_id)

    def find_pending(self, member_id: int, club_id: int) -> Optional[MembershipApplication]:
        statement = select(MembershipApplication).where(MembershipApplication.member_id == member_id,
                                                        MembershipApplication.club_id == club_id,
                                                        MembershipApplication.status == ApplicationStatus.pending.value, )
        return self.session.exec(statement).first()

    def latest_for_member(self, member_id: int) -> Optional[MembershipApplication]:
        statement = (select(MembershipApplication).where(MembershipApplication.member_id == member_id).order_by(
            MembershipApplication.created_at.desc(), MembershipApplication.id.desc()))
        return self.session.exec(statement).first()

    def list(self, statement, status: Optional[ApplicationStatus] = None) -> list[MembershipApplication]:
        if status is not None:
            statement = statement.where(MembershipApplication.status == status.value)
        statement = statement.order_by(MembershipApplication.created_at.desc(), MembershipApplication.id.desc())
        return list(self.session.exec(statement).all())

    def transition(self, application: MembershipApplication, from_statuses: Iterable[ApplicationStatus],
                   **values) -> bool:
        """Apply ``values`` only if the row is still in ``from_statuses``."""
        statement = (update(MembershipApplication).where(MembershipApplication.id == application.id,
                                                         MembershipApplication.status.in_(
                                                             [s.value for s in from_statuses])).values(
            **values).execution_options(synchronize_session=False))
        result = self.session.exec(statement)
        if result.rowcount != 1:
            return False
        self.session.refresh(application)
        return True
