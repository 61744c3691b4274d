"""
Audit recorder.

Every mutating service operation writes exactly one entry through
:meth:`AuditRecorder.record` inside its own unit of work, so the entry
commits or rolls back together with the change it describes.

Timestamps are assigned here, never by the caller, and never go backwards
relative to the newest stored entry.  Queries order by ``created_at``
descending with ``id`` as the tie-breaker.
"""

import datetime
from typing import Any, Optional

from loguru import logger
from sqlmodel import Session, select

from app.core.clock import Clock, utcnow
from app.db.repositories.audit_log import AuditLogRepository
from app.membership import guard
from app.models.audit_log import AuditLogEntry
from app.schemas.actor import Actor, Role
from app.schemas.audit import AuditEntryResponse, AuditPage, AuditQuery
from app.schemas.events import NotificationEvent
from app.services.notification_service import event_from_entry


class AuditRecorder:
    """Append-only audit log writer and reader."""

    def __init__(self, session: Session, clock: Clock = utcnow):
        self.repository = AuditLogRepository(session)
        self.clock = clock
        # Events for entries written in the current unit of work.
        self.outbox: list[NotificationEvent] = []

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def _next_timestamp(self) -> datetime.datetime:
        stamp = self.clock()
        latest = self.repository.latest_timestamp()
        if latest is not None and latest > stamp:
            return latest
        return stamp

    def record(self, actor_id: Optional[str], actor_role: Optional[str], action_type: str, entity_type: str,
               entity_id: Any, details: Optional[dict[str, Any]] = None,
               club_id: Optional[int] = None, ) -> AuditLogEntry:
        entry = AuditLogEntry(actor_id=actor_id, actor_role=actor_role, club_id=club_id, action_type=action_type,
                              entity_type=entity_type, entity_id=str(entity_id) if entity_id is not None else None,
                              details=details, created_at=self._next_timestamp(), )
        entry = self.repository.add(entry)
        self.outbox.append(event_from_entry(entry))
        logger.debug("Audit {} {} {} by {}", action_type, entity_type, entry.entity_id, actor_id)
        return entry

    def record_for(self, actor: Actor, action_type: str, entity_type: str, entity_id: Any,
                   details: Optional[dict[str, Any]] = None, club_id: Optional[int] = None, ) -> AuditLogEntry:
        """``record`` with the actor's identity and role filled in."""
        return self.record(actor.identity_id, actor.role.value, action_type, entity_type, entity_id, details,
                           club_id, )

    def drain(self) -> list[NotificationEvent]:
        events, self.outbox = self.outbox, []
        return events

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _filtered(self, actor: Actor, filters: AuditQuery):
        guard.require_role(actor, Role.admin, Role.coach)
        statement = guard.scope(select(AuditLogEntry), AuditLogEntry, actor)
        if filters.actor_id is not None:
            statement = statement.where(AuditLogEntry.actor_id == filters.actor_id)
        if filters.entity_type is not None:
            statement = statement.where(AuditLogEntry.entity_type == filters.entity_type)
        if filters.action_type is not None:
            statement = statement.where(AuditLogEntry.action_type == filters.action_type)
        if filters.start is not None:
            statement = statement.where(AuditLogEntry.created_at >= filters.start)
        if filters.end is not None:
            statement = statement.where(AuditLogEntry.created_at <= filters.end)
        return statement

    def query(self, actor: Actor, filters: Optional[AuditQuery] = None) -> list[AuditLogEntry]:
        filters = filters or AuditQuery()
        return self.repository.query(self._filtered(actor, filters), filters.limit, filters.offset)

    def count(self, actor: Actor, filters: Optional[AuditQuery] = None) -> int:
        return self.repository.count(self._filtered(actor, filters or AuditQuery()))

    def page(self, actor: Actor, filters: Optional[AuditQuery] = None) -> AuditPage:
        filters = filters or AuditQuery()
        entries = self.query(actor, filters)
        return AuditPage(total=self.count(actor, filters),
                         entries=[AuditEntryResponse.model_validate(e) for e in entries], )
