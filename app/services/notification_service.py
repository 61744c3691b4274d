"""
Notification events.

After a unit of work commits, every audit entry it produced is turned into a
:class:`NotificationEvent` and handed to a dispatcher.  Delivery (push,
e-mail, ...) lives outside this service; the default dispatcher only logs.
"""

from typing import Iterable, Optional, Protocol

from loguru import logger

from app.models.audit_log import AuditLogEntry
from app.schemas.events import NotificationEvent


class NotificationDispatcher(Protocol):
    def dispatch(self, event: NotificationEvent) -> None:
        ...


class LoggingDispatcher:
    """Default dispatcher: writes each event to the log."""

    def dispatch(self, event: NotificationEvent) -> None:
        logger.info("Notify {}.{} {} (club={}, actor={})", event.entity_type, event.action_type, event.entity_id,
                    event.club_id, event.actor_id)


def event_from_entry(entry: AuditLogEntry) -> NotificationEvent:
    return NotificationEvent(entity_type=entry.entity_type, entity_id=entry.entity_id,
                             action_type=entry.action_type, club_id=entry.club_id, actor_id=entry.actor_id,
                             occurred_at=entry.created_at, details=entry.details or {}, )


class Notifier:
    """Fire-and-forget publisher.

    A failing dispatcher is logged; it never reaches the caller, whose
    transaction has already committed.
    """

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        self.dispatcher = dispatcher or LoggingDispatcher()

    def publish(self, event: NotificationEvent) -> None:
        try:
            self.dispatcher.dispatch(event)
        except Exception:
            logger.exception("Dispatch failed for {}.{} {}", event.entity_type, event.action_type, event.entity_id)

    def publish_all(self, events: Iterable[NotificationEvent]) -> None:
        for event in events:
            self.publish(event)
