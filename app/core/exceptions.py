"""
Domain error taxonomy.

Services raise these; the API layer maps them to HTTP responses.
``Forbidden`` and ``NotFound`` share one public message so callers cannot
discover entities outside their club.
"""

NOT_AVAILABLE = "The requested resource is not available"


class ClubError(Exception):
    """Base class for every error raised by the core."""

    code = "error"
    default_message = "Operation failed"

    def __init__(self, message: str | None = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


# ----------------------------------------------------------------------
# Visibility
# ----------------------------------------------------------------------


class NotAvailable(ClubError):
    code = "not_available"
    default_message = NOT_AVAILABLE


class Forbidden(NotAvailable):
    """The actor may not act on the entity."""

    code = "not_available"


class NotFound(NotAvailable):
    """The entity does not exist."""

    code = "not_available"


# ----------------------------------------------------------------------
# State
# ----------------------------------------------------------------------


class InvalidState(ClubError):
    code = "invalid_state"
    default_message = "Operation is not allowed in the current state"


class AlreadyReviewed(InvalidState):
    code = "already_reviewed"
    default_message = "This request has already been reviewed"


class AlreadyCheckedIn(InvalidState):
    code = "already_checked_in"
    default_message = "Attendance has already been recorded for this session"


class SessionCancelled(InvalidState):
    code = "session_cancelled"
    default_message = "The training session has been cancelled"


class MembershipInactive(InvalidState):
    code = "membership_inactive"
    default_message = "Membership is not active"


class LeadTimeViolation(InvalidState):
    code = "lead_time_violation"
    default_message = "Too close to the session start time"


# ----------------------------------------------------------------------
# Uniqueness
# ----------------------------------------------------------------------


class Conflict(ClubError):
    code = "conflict"
    default_message = "The request conflicts with an existing record"


class DuplicateApplication(Conflict):
    code = "duplicate_application"
    default_message = "A pending application for this club already exists"


class DuplicateRequest(Conflict):
    code = "duplicate_request"
    default_message = "A pending leave request for this session already exists"


# ----------------------------------------------------------------------
# Input
# ----------------------------------------------------------------------


class ValidationError(ClubError):
    code = "validation_error"
    default_message = "Invalid input"
