"""
Membership application service.

Implements the application state machine::

    pending --approve-----> approved        (terminal; member becomes active)
    pending --reject------> rejected        (terminal)
    pending --request_info-> info_requested
    info_requested --resubmit--> pending

Review is a compare-and-set on the current status: of two concurrent
reviewers exactly one wins, the other gets ``AlreadyReviewed``.  Approval is
the only place in the code base that sets ``Member.access_flag`` to
``active``.
"""

from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.clock import Clock, now, utcnow
from app.core.exceptions import AlreadyReviewed, DuplicateApplication, InvalidState, NotFound, ValidationError
from app.db.repositories.application import ApplicationRepository
from app.db.repositories.club import ClubRepository, MemberRepository
from app.membership import guard
from app.membership.guard import Action
from app.membership.transitions import (APPLICATION_DECISION_TARGET, APPLICATION_TRANSITIONS,
                                        REVIEWABLE_APPLICATION, ReviewDecision, ensure_transition, )
from app.models.application import ApplicationStatus, MembershipApplication
from app.models.member import AccessFlag, Member
from app.schemas.actor import Actor, Role
from app.schemas.application import (AccessStatusResponse, ActivityLogEntry, ApplicationResponse,
                                     ApplicationResubmit, ApplicationReview, ApplicationSubmit, DocumentEntry,
                                     MAX_AGE, MIN_AGE, PersonalInfo, ReviewInfo, age_in_range, )
from app.services.base import BaseService
from app.services.notification_service import NotificationDispatcher

ENTITY = "membership_application"

_ACCESS_REASONS = {
    ApplicationStatus.pending: "Your application is waiting for review",
    ApplicationStatus.info_requested: "The club has asked for more information on your application",
    ApplicationStatus.rejected: "Your application was rejected",
}
_NO_APPLICATION_REASON = "Please apply for membership to use club features"
_SUSPENDED_REASON = "Your membership is suspended"


class ApplicationService(BaseService):
    """Service for membership application business logic."""

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(session, clock, dispatcher)
        self.repository = ApplicationRepository(session)
        self.members = MemberRepository(session)
        self.clubs = ClubRepository(session)

    # ==================================================================
    # Submission
    # ==================================================================

    def submit(self, actor: Actor, data: ApplicationSubmit) -> ApplicationResponse:
        guard.require_role(actor, Role.member)
        member = self._acting_member(actor)
        club = guard.visible(actor, self.clubs.get_by_id(data.club_id))
        if not club.is_active:
            raise NotFound()
        self._check_age(data.personal_info)

        with self.unit_of_work():
            if self.repository.find_pending(member.id, club.id) is not None:
                raise DuplicateApplication()

            stamp = utcnow()
            application = MembershipApplication(member_id=member.id, identity_id=actor.identity_id, club_id=club.id,
                                                status=ApplicationStatus.pending.value,
                                                personal_info=data.personal_info.model_dump(mode="json"),
                                                documents=[d.model_dump(mode="json") for d in data.documents],
                                                activity_log=[self._activity("submitted", actor, {
                                                    "club_id": club.id})], created_at=stamp, updated_at=stamp, )
            try:
                application = self.repository.create(application)
            except IntegrityError as exc:
                raise DuplicateApplication() from exc

            self.audit.record_for(actor, "application_submitted", ENTITY, application.id,
                                  {"member_id": member.id, "status": ApplicationStatus.pending.value},
                                  club_id=club.id, )

        logger.info("Application {} submitted by member {} to club {}", application.id, member.id, club.id)
        return self._to_response(application)

    def resubmit(self, actor: Actor, application_id: int, data: ApplicationResubmit) -> ApplicationResponse:
        """Answer an info request; moves the application back to ``pending``."""
        guard.require_role(actor, Role.member)
        application = guard.visible(actor, self.repository.get_by_id(application_id), Action.write)
        ensure_transition(APPLICATION_TRANSITIONS, application.status, ApplicationStatus.pending)
        if data.personal_info is not None:
            self._check_age(data.personal_info)

        values = {"status": ApplicationStatus.pending.value, "updated_at": utcnow(),
                  "activity_log": application.activity_log + [self._activity("resubmitted", actor)], }
        if data.personal_info is not None:
            values["personal_info"] = data.personal_info.model_dump(mode="json")
        if data.documents is not None:
            values["documents"] = [d.model_dump(mode="json") for d in data.documents]

        with self.unit_of_work():
            try:
                moved = self.repository.transition(application, [ApplicationStatus.info_requested], **values)
            except IntegrityError as exc:
                raise DuplicateApplication() from exc
            if not moved:
                raise InvalidState("The application is no longer waiting for more information")
            self.audit.record_for(actor, "application_resubmitted", ENTITY, application.id,
                                  {"old_status": ApplicationStatus.info_requested.value,
                                   "new_status": ApplicationStatus.pending.value}, club_id=application.club_id, )

        return self._to_response(application)

    # ==================================================================
    # Review
    # ==================================================================

    def review(self, actor: Actor, application_id: int, data: ApplicationReview) -> ApplicationResponse:
        guard.require_role(actor, Role.admin, Role.coach)
        application = guard.visible(actor, self.repository.get_by_id(application_id), Action.write)

        target = APPLICATION_DECISION_TARGET[data.decision]
        old_status = ApplicationStatus(application.status)
        ensure_transition(APPLICATION_TRANSITIONS, old_status, target)

        if data.decision == ReviewDecision.reject and not data.notes:
            raise ValidationError("A reason is required to reject an application")
        if data.decision == ReviewDecision.request_info and not (data.notes or data.requested_changes):
            raise ValidationError("Say what information is missing")

        stamp = utcnow()
        values = {"status": target.value, "updated_at": stamp,
                  "activity_log": application.activity_log + [self._activity(target.value, actor, {
                      "notes": data.notes})], }
        if data.decision == ReviewDecision.request_info:
            # Review metadata stays empty until a final decision.
            values["requested_changes"] = data.requested_changes or [data.notes]
        else:
            values["reviewed_by"] = actor.identity_id
            values["reviewed_at"] = stamp
            values["review_notes"] = data.notes
        if data.decision == ReviewDecision.reject:
            values["rejection_reason"] = data.notes

        with self.unit_of_work():
            if not self.repository.transition(application, REVIEWABLE_APPLICATION, **values):
                raise AlreadyReviewed()

            if data.decision == ReviewDecision.approve:
                self._activate_member(application, stamp)

            self.audit.record_for(actor, f"application_{target.value}", ENTITY, application.id,
                                  {"old_status": old_status.value, "new_status": target.value,
                                   "member_id": application.member_id, "notes": data.notes},
                                  club_id=application.club_id, )

        logger.info("Application {} {} -> {} by {}", application.id, old_status.value, target.value,
                    actor.identity_id)
        return self._to_response(application)

    def _activate_member(self, application: MembershipApplication, stamp) -> Member:
        member = self.members.get_by_id(application.member_id)
        info = PersonalInfo.model_validate(application.personal_info)
        member.full_name = info.full_name
        member.nickname = info.nickname
        member.phone_number = info.phone_number
        member.health_notes = info.medical_conditions
        return self.members.set_access_flag(member, AccessFlag.active.value, stamp)

    # ==================================================================
    # Queries
    # ==================================================================

    def get(self, actor: Actor, application_id: int) -> ApplicationResponse:
        application = guard.visible(actor, self.repository.get_by_id(application_id))
        return self._to_response(application)

    def list_for_club(self, actor: Actor, club_id: int,
                      status: Optional[ApplicationStatus] = None) -> list[ApplicationResponse]:
        guard.require_role(actor, Role.admin, Role.coach)
        guard.visible(actor, self.clubs.get_by_id(club_id))
        statement = guard.scope(select(MembershipApplication), MembershipApplication, actor).where(
            MembershipApplication.club_id == club_id)
        return [self._to_response(a) for a in self.repository.list(statement, status)]

    def list_for_member(self, actor: Actor, member_id: Optional[int] = None) -> list[ApplicationResponse]:
        member_id = member_id if member_id is not None else actor.member_id
        member = guard.visible(actor, self.members.get_by_id(member_id) if member_id is not None else None)
        statement = guard.scope(select(MembershipApplication), MembershipApplication, actor).where(
            MembershipApplication.member_id == member.id)
        return [self._to_response(a) for a in self.repository.list(statement)]

    def access_status(self, actor: Actor) -> AccessStatusResponse:
        """Whether the acting member may use club features, and why not."""
        if not actor.is_member:
            return AccessStatusResponse(has_access=True)

        member = self.members.get_by_id(actor.member_id) if actor.member_id is not None else None
        if member is None:
            return AccessStatusResponse(has_access=False, reason=_NO_APPLICATION_REASON)

        club = self.clubs.get_by_id(member.club_id)
        club_name = club.name if club else None
        if member.access_flag == AccessFlag.active:
            return AccessStatusResponse(has_access=True, access_flag=member.access_flag, club_name=club_name)
        if member.access_flag == AccessFlag.suspended:
            return AccessStatusResponse(has_access=False, access_flag=member.access_flag,
                                        reason=_SUSPENDED_REASON, club_name=club_name)

        latest = self.repository.latest_for_member(member.id)
        if latest is None:
            return AccessStatusResponse(has_access=False, access_flag=member.access_flag,
                                        reason=_NO_APPLICATION_REASON, club_name=club_name)
        return AccessStatusResponse(has_access=False, access_flag=member.access_flag,
                                    reason=_ACCESS_REASONS.get(ApplicationStatus(latest.status),
                                                               _NO_APPLICATION_REASON),
                                    application_id=latest.id, club_name=club_name,
                                    rejection_reason=latest.rejection_reason, )

    # ==================================================================
    # Helpers
    # ==================================================================

    def _acting_member(self, actor: Actor) -> Member:
        if actor.member_id is None:
            raise NotFound()
        return guard.visible(actor, self.members.get_by_id(actor.member_id), Action.write)

    def _check_age(self, info: PersonalInfo) -> None:
        if not age_in_range(info.date_of_birth, self.clock().date()):
            raise ValidationError(f"Applicants must be between {MIN_AGE} and {MAX_AGE} years old")

    @staticmethod
    def _activity(action: str, actor: Actor, details: Optional[dict] = None) -> dict:
        entry = ActivityLogEntry(action=action, by_user=actor.identity_id, timestamp=utcnow(),
                                 details=details or {})
        return entry.model_dump(mode="json")

    @staticmethod
    def _to_response(application: MembershipApplication) -> ApplicationResponse:
        review = None
        if application.reviewed_by is not None and application.reviewed_at is not None:
            review = ReviewInfo(reviewed_by=application.reviewed_by, reviewed_at=application.reviewed_at,
                                notes=application.review_notes)
        return ApplicationResponse(id=application.id, member_id=application.member_id,
                                   club_id=application.club_id, status=application.status,
                                   personal_info=PersonalInfo.model_validate(application.personal_info),
                                   documents=[DocumentEntry.model_validate(d) for d in application.documents],
                                   review=review, rejection_reason=application.rejection_reason,
                                   requested_changes=application.requested_changes,
                                   activity_log=[ActivityLogEntry.model_validate(e) for e in
                                                 application.activity_log], created_at=application.created_at,
                                   updated_at=application.updated_at, )
