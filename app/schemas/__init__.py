"""Pydantic schemas for request/response validation."""

from app.schemas.actor import Actor, Role
from app.schemas.application import (
    AccessStatusResponse,
    ActivityLogEntry,
    ApplicationResponse,
    ApplicationResubmit,
    ApplicationReview,
    ApplicationSubmit,
    DocumentEntry,
    PersonalInfo,
    ReviewInfo,
)
from app.schemas.attendance import AttendanceMark, AttendanceResponse, AttendanceStats, CheckInRequest
from app.schemas.audit import AuditEntryResponse, AuditPage, AuditQuery
from app.schemas.club import ClubCreate, ClubResponse, CoachCreate, CoachResponse, MemberProvision, MemberResponse
from app.schemas.events import NotificationEvent
from app.schemas.leave_request import LeaveRequestCreate, LeaveRequestResponse, LeaveReview
from app.schemas.training_session import TrainingSessionCreate, TrainingSessionResponse, TrainingSessionUpdate

__all__ = [
    "Actor",
    "Role",
    "PersonalInfo",
    "DocumentEntry",
    "ActivityLogEntry",
    "ReviewInfo",
    "ApplicationSubmit",
    "ApplicationResubmit",
    "ApplicationReview",
    "ApplicationResponse",
    "AccessStatusResponse",
    "AttendanceMark",
    "CheckInRequest",
    "AttendanceResponse",
    "AttendanceStats",
    "AuditQuery",
    "AuditEntryResponse",
    "AuditPage",
    "ClubCreate",
    "ClubResponse",
    "CoachCreate",
    "CoachResponse",
    "MemberProvision",
    "MemberResponse",
    "NotificationEvent",
    "LeaveRequestCreate",
    "LeaveReview",
    "LeaveRequestResponse",
    "TrainingSessionCreate",
    "TrainingSessionUpdate",
    "TrainingSessionResponse",
]
