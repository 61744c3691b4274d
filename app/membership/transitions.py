"""
Status transition tables.

Pure functions, no database access.  Services look up the target status for
a decision here and ask whether the move is legal from the current status.
"""

from __future__ import annotations

from enum import Enum

from app.core.exceptions import AlreadyReviewed, InvalidState
from app.models.application import ApplicationStatus
from app.models.leave_request import LeaveStatus


class ReviewDecision(str, Enum):
    approve = "approve"
    reject = "reject"
    request_info = "request_info"


class LeaveDecision(str, Enum):
    approve = "approve"
    reject = "reject"


APPLICATION_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.pending: frozenset(
        {ApplicationStatus.approved, ApplicationStatus.rejected, ApplicationStatus.info_requested}),
    ApplicationStatus.info_requested: frozenset(
        {ApplicationStatus.pending, ApplicationStatus.approved, ApplicationStatus.rejected,
         ApplicationStatus.info_requested}),
    ApplicationStatus.approved: frozenset(),
    ApplicationStatus.rejected: frozenset(),
}

LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.pending: frozenset({LeaveStatus.approved, LeaveStatus.rejected}),
    LeaveStatus.approved: frozenset(),
    LeaveStatus.rejected: frozenset(),
}

APPLICATION_DECISION_TARGET: dict[ReviewDecision, ApplicationStatus] = {
    ReviewDecision.approve: ApplicationStatus.approved,
    ReviewDecision.reject: ApplicationStatus.rejected,
    ReviewDecision.request_info: ApplicationStatus.info_requested,
}

LEAVE_DECISION_TARGET: dict[LeaveDecision, LeaveStatus] = {
    LeaveDecision.approve: LeaveStatus.approved,
    LeaveDecision.reject: LeaveStatus.rejected,
}

# Statuses a reviewer may act on.
REVIEWABLE_APPLICATION = frozenset({ApplicationStatus.pending, ApplicationStatus.info_requested})
REVIEWABLE_LEAVE = frozenset({LeaveStatus.pending})


def is_terminal(table: dict, status: Enum) -> bool:
    return not table[status]


def can_transition(table: dict, current: Enum, target: Enum) -> bool:
    return target in table[current]


def ensure_transition(table: dict, current: str, target: Enum) -> None:
    """Raise unless ``current -> target`` is a legal move.

    A move out of a terminal status raises ``AlreadyReviewed``; any other
    illegal move raises ``InvalidState``.
    """
    status_type = type(target)
    current = status_type(current)
    if is_terminal(table, current):
        raise AlreadyReviewed(f"This request has already been {current.value}")
    if not can_transition(table, current, target):
        raise InvalidState(f"Cannot move from {current.value} to {target.value}")
