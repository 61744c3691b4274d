"""
Notification event schema.

Carries everything a dispatcher needs to route without querying back.
"""

import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class NotificationEvent(BaseModel):
    entity_type: str
    entity_id: Optional[str]
    action_type: str
    club_id: Optional[int]
    actor_id: Optional[str] = None
    occurred_at: datetime.datetime
    details: dict[str, Any] = Field(default_factory=dict)
