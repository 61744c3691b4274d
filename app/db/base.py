"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.club import Club  # noqa: F401
from app.models.member import Member  # noqa: F401
from app.models.coach import Coach  # noqa: F401
from app.models.application import MembershipApplication  # noqa: F401
from app.models.training_session import TrainingSession  # noqa: F401
from app.models.attendance import AttendanceRecord  # noqa: F401
from app.models.leave_request import LeaveRequest  # noqa: F401
from app.models.audit_log import AuditLogEntry  # noqa: F401
from app.models.idempotency_key import IdempotencyKey  # noqa: F401
