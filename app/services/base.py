"""
Shared plumbing for the state-changing services.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlmodel import Session

from app.core.clock import Clock, now
from app.db.session import atomic
from app.services.audit_service import AuditRecorder
from app.services.notification_service import NotificationDispatcher, Notifier


class BaseService:
    """Holds the session, the business clock, the audit recorder and the notifier.

    ``clock`` is the club-local "now" used for date and lead-time rules;
    audit timestamps come from the recorder's own UTC clock.
    """

    def __init__(self, session: Session, clock: Clock = now, dispatcher: Optional[NotificationDispatcher] = None,
                 audit: Optional[AuditRecorder] = None, ):
        self.session = session
        self.clock = clock
        self.audit = audit or AuditRecorder(session)
        self.notifier = Notifier(dispatcher)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Run one public operation atomically, then publish its events."""
        self.audit.drain()
        with atomic(self.session):
            yield self.session
        self.notifier.publish_all(self.audit.drain())
