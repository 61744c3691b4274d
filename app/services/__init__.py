"""Business logic services."""

from app.services.audit_service import AuditRecorder
from app.services.notification_service import LoggingDispatcher, Notifier
from app.services.club_service import ClubService
from app.services.application_service import ApplicationService
from app.services.training_session_service import TrainingSessionService
from app.services.attendance_service import AttendanceService
from app.services.leave_request_service import LeaveRequestService
from app.services.idempotency_service import IdempotencyService

__all__ = [
    "AuditRecorder",
    "LoggingDispatcher",
    "Notifier",
    "ClubService",
    "ApplicationService",
    "TrainingSessionService",
    "AttendanceService",
    "LeaveRequestService",
    "IdempotencyService",
]
