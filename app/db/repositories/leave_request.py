"""
Leave request repository.

Reviews go through :meth:`LeaveRequestRepository.transition`, a conditional
UPDATE guarded on ``status = 'pending'``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.leave_request import LeaveRequest, LeaveStatus


class LeaveRequestRepository:
    """Repository for LeaveRequest database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, request: LeaveRequest) -> LeaveRequest:
        self.session.add(request)
        self.session.flush()
        self.session.refresh(request)
        return request

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self.session.get(LeaveRequest, request_id)

    def find_pending(self, session_id: int, member_id: int) -> Optional[LeaveRequest]:
        statement = select(LeaveRequest).where(LeaveRequest.session_id == session_id,
                                               LeaveRequest.member_id == member_id,
                                               LeaveRequest.status == LeaveStatus.pending.value, )
        return self.session.exec(statement).first()

    def list(self, statement, status: Optional[LeaveStatus] = None) -> list[LeaveRequest]:
        if status is not None:
            statement = statement.where(LeaveRequest.status == status.value)
        statement = statement.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        return list(self.session.exec(statement).all())

    def transition(self, request: LeaveRequest, from_statuses: Iterable[LeaveStatus], **values) -> bool:
        statement = (update(LeaveRequest).where(LeaveRequest.id == request.id, LeaveRequest.status.in_(
            [s.value for s in from_statuses])).values(**values).execution_options(synchronize_session=False))
        result = self.session.exec(statement)
        if result.rowcount != 1:
            return False
        self.session.refresh(request)
        return True
