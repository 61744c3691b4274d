"""SQLModel database models."""

from app.models.club import Club
from app.models.member import AccessFlag, Member
from app.models.coach import Coach
from app.models.application import ApplicationStatus, MembershipApplication
from app.models.training_session import SessionStatus, TrainingSession
from app.models.attendance import AttendanceRecord, AttendanceStatus, CheckInMethod
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.models.audit_log import AuditLogEntry
from app.models.idempotency_key import IdempotencyKey

__all__ = [
    "Club",
    "Member",
    "AccessFlag",
    "Coach",
    "MembershipApplication",
    "ApplicationStatus",
    "TrainingSession",
    "SessionStatus",
    "AttendanceRecord",
    "AttendanceStatus",
    "CheckInMethod",
    "LeaveRequest",
    "LeaveStatus",
    "AuditLogEntry",
    "IdempotencyKey",
]
