"""Database repositories."""

from app.db.repositories.club import ClubRepository, CoachRepository, MemberRepository
from app.db.repositories.application import ApplicationRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.db.repositories.attendance import AttendanceRepository
from app.db.repositories.leave_request import LeaveRequestRepository
from app.db.repositories.audit_log import AuditLogRepository
from app.db.repositories.idempotency import IdempotencyRepository

__all__ = [
    "ClubRepository",
    "CoachRepository",
    "MemberRepository",
    "ApplicationRepository",
    "TrainingSessionRepository",
    "AttendanceRepository",
    "LeaveRequestRepository",
    "AuditLogRepository",
    "IdempotencyRepository",
]
