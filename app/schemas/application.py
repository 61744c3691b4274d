"""
Membership application API schemas.

Personal info, documents and activity entries are explicit tagged records,
validated here at the application boundary instead of being threaded
through the layers as opaque JSON.
"""

import datetime
import re
from enum import Enum
from typing import Any, Optional

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator, model_validator

from app.core.config import settings
from app.models.application import ApplicationStatus
from app.membership.transitions import ReviewDecision

PHONE_PATTERN = re.compile(r"^0[0-9]{2}-[0-9]{3}-[0-9]{4}$")
MIN_AGE = 5
MAX_AGE = 100


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class DocumentType(str, Enum):
    id_card = "id_card"
    house_registration = "house_registration"
    birth_certificate = "birth_certificate"


REQUIRED_DOCUMENT_TYPES = frozenset(DocumentType)


# ----------------------------------------------------------------------
# Tagged records
# ----------------------------------------------------------------------


class PersonalInfo(BaseModel):
    """Snapshot of the applicant's personal details.

    Only static format rules live here, so stored snapshots always read back.
    The age range depends on "today" and is checked by the service on submit.
    """

    full_name: str = Field(..., min_length=2, max_length=100)
    nickname: Optional[str] = Field(None, max_length=50)
    gender: Gender
    date_of_birth: datetime.date
    phone_number: str = Field(..., description="Format 0XX-XXX-XXXX")
    address: str = Field(..., min_length=10, max_length=500)
    emergency_contact: str = Field(..., description="Format 0XX-XXX-XXXX")
    blood_type: Optional[str] = Field(None, max_length=5)
    medical_conditions: Optional[str] = Field(None, max_length=1000)

    @field_validator("full_name", "address")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("phone_number", "emergency_contact")
    @classmethod
    def _phone_format(cls, value: str) -> str:
        if not PHONE_PATTERN.match(value):
            raise ValueError("phone number must look like 081-234-5678")
        return value


class DocumentEntry(BaseModel):
    """Reference to a document held by the external storage service."""

    type: DocumentType
    url: AnyHttpUrl
    file_name: str = Field(..., min_length=1, max_length=255)
    file_size: int = Field(..., gt=0)
    uploaded_at: datetime.datetime
    is_verified: bool = False


class ActivityLogEntry(BaseModel):
    """One line of an application's own history."""

    action: str
    by_user: str
    timestamp: datetime.datetime
    details: dict[str, Any] = Field(default_factory=dict)


def validate_document_set(documents: list[DocumentEntry]) -> list[DocumentEntry]:
    types = [d.type for d in documents]
    if len(types) != len(REQUIRED_DOCUMENT_TYPES) or set(types) != REQUIRED_DOCUMENT_TYPES:
        raise ValueError("exactly one id_card, house_registration and birth_certificate document is required")
    for document in documents:
        if document.file_size > settings.MAX_DOCUMENT_SIZE:
            raise ValueError(f"{document.file_name} must not exceed {settings.MAX_DOCUMENT_SIZE} bytes")
    return documents


def age_on(date_of_birth: datetime.date, today: datetime.date) -> int:
    """Age in calendar years, the way the registration form counts it."""
    return today.year - date_of_birth.year


def age_in_range(date_of_birth: datetime.date, today: datetime.date) -> bool:
    return MIN_AGE <= age_on(date_of_birth, today) <= MAX_AGE


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------


class ApplicationSubmit(BaseModel):
    club_id: int
    personal_info: PersonalInfo
    documents: list[DocumentEntry]

    @field_validator("documents")
    @classmethod
    def _document_set(cls, value: list[DocumentEntry]) -> list[DocumentEntry]:
        return validate_document_set(value)


class ApplicationResubmit(BaseModel):
    personal_info: Optional[PersonalInfo] = None
    documents: Optional[list[DocumentEntry]] = None

    @field_validator("documents")
    @classmethod
    def _document_set(cls, value: Optional[list[DocumentEntry]]) -> Optional[list[DocumentEntry]]:
        return validate_document_set(value) if value is not None else value


class ApplicationReview(BaseModel):
    decision: ReviewDecision
    notes: Optional[str] = Field(None, max_length=1000)
    requested_changes: Optional[list[str]] = None

    @model_validator(mode="after")
    def _strip_notes(self) -> "ApplicationReview":
        if self.notes is not None:
            self.notes = self.notes.strip() or None
        return self


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------


class ReviewInfo(BaseModel):
    reviewed_by: str
    reviewed_at: datetime.datetime
    notes: Optional[str] = None


class ApplicationResponse(BaseModel):
    id: int
    member_id: int
    club_id: int
    status: ApplicationStatus
    personal_info: PersonalInfo
    documents: list[DocumentEntry]
    review: Optional[ReviewInfo] = None
    rejection_reason: Optional[str] = None
    requested_changes: Optional[list[str]] = None
    activity_log: list[ActivityLogEntry]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class AccessStatusResponse(BaseModel):
    has_access: bool
    access_flag: Optional[str] = None
    reason: Optional[str] = None
    application_id: Optional[int] = None
    club_name: Optional[str] = None
    rejection_reason: Optional[str] = None
