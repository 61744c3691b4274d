"""Tests for the application and leave status transition tables."""

import pytest

from app.core.exceptions import AlreadyReviewed, InvalidState
from app.membership.transitions import (APPLICATION_DECISION_TARGET, APPLICATION_TRANSITIONS, LEAVE_TRANSITIONS,
                                        ReviewDecision, can_transition, ensure_transition, is_terminal, )
from app.models.application import ApplicationStatus
from app.models.leave_request import LeaveStatus

# ======================================================================
# Applications
# ======================================================================


class TestApplicationTransitions:
    @pytest.mark.parametrize("target", [ApplicationStatus.approved, ApplicationStatus.rejected,
                                        ApplicationStatus.info_requested])
    def test_pending_to_decisions(self, target):
        assert can_transition(APPLICATION_TRANSITIONS, ApplicationStatus.pending, target)

    def test_resubmission_is_the_only_reentry(self):
        reentries = [s for s, targets in APPLICATION_TRANSITIONS.items() if ApplicationStatus.pending in targets]
        assert reentries == [ApplicationStatus.info_requested]

    @pytest.mark.parametrize("status", [ApplicationStatus.approved, ApplicationStatus.rejected])
    def test_terminal(self, status):
        assert is_terminal(APPLICATION_TRANSITIONS, status)

    def test_decision_targets(self):
        assert APPLICATION_DECISION_TARGET[ReviewDecision.approve] == ApplicationStatus.approved
        assert APPLICATION_DECISION_TARGET[ReviewDecision.reject] == ApplicationStatus.rejected
        assert APPLICATION_DECISION_TARGET[ReviewDecision.request_info] == ApplicationStatus.info_requested

    @pytest.mark.parametrize("current", ["approved", "rejected"])
    def test_review_of_terminal_is_already_reviewed(self, current):
        with pytest.raises(AlreadyReviewed):
            ensure_transition(APPLICATION_TRANSITIONS, current, ApplicationStatus.approved)

    def test_pending_to_pending_is_invalid(self):
        with pytest.raises(InvalidState) as excinfo:
            ensure_transition(APPLICATION_TRANSITIONS, "pending", ApplicationStatus.pending)
        assert not isinstance(excinfo.value, AlreadyReviewed)

    def test_accepts_enum_or_string(self):
        ensure_transition(APPLICATION_TRANSITIONS, ApplicationStatus.info_requested, ApplicationStatus.pending)
        ensure_transition(APPLICATION_TRANSITIONS, "info_requested", ApplicationStatus.pending)


# ======================================================================
# Leave requests
# ======================================================================


class TestLeaveTransitions:
    def test_pending_decisions(self):
        assert LEAVE_TRANSITIONS[LeaveStatus.pending] == {LeaveStatus.approved, LeaveStatus.rejected}

    @pytest.mark.parametrize("current", ["approved", "rejected"])
    def test_terminal_is_immutable(self, current):
        with pytest.raises(AlreadyReviewed):
            ensure_transition(LEAVE_TRANSITIONS, current, LeaveStatus.rejected)
