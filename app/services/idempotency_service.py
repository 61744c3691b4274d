"""
Idempotent retry support.

Clients may send an ``Idempotency-Key`` header with a write.  The first
successful response is stored under (identity, route, key); a retry with the
same key and payload gets that response back without running the operation
again, so it creates no second record and no second audit entry.  Failed
operations are not stored and may be retried.
"""

import datetime
import hashlib
import json
import re
from typing import Any, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.clock import Clock, utcnow
from app.core.config import settings
from app.core.exceptions import Conflict, ValidationError
from app.db.repositories.idempotency import IdempotencyRepository
from app.db.session import atomic
from app.models.idempotency_key import IdempotencyKey

# A UUID or any other string of letters, digits, '-' and '_'.
KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,128}$")


def fingerprint(payload: Any) -> str:
    """Stable sha256 of a JSON-compatible payload."""
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode()).hexdigest()


class IdempotencyService:
    """Look up and store replayable responses."""

    def __init__(self, session: Session, clock: Clock = utcnow):
        self.session = session
        self.clock = clock
        self.repository = IdempotencyRepository(session)

    @staticmethod
    def validate_key(key: str) -> str:
        if not KEY_PATTERN.match(key):
            raise ValidationError("Idempotency-Key must be a UUID or an alphanumeric string of 8-128 characters")
        return key

    def replay(self, identity_id: str, route: str, key: str, request_hash: str) -> Optional[dict]:
        """Stored response for this key, or None if the operation should run."""
        self.validate_key(key)
        record = self.repository.get(identity_id, route, key)
        if record is None:
            return None
        if record.is_expired(self.clock()):
            with atomic(self.session):
                self.repository.delete(record)
            return None
        if record.request_hash != request_hash:
            raise Conflict("This Idempotency-Key was already used for a different request")
        logger.info("Replaying {} for {} with key {}", route, identity_id, key)
        return record.response

    def remember(self, identity_id: str, route: str, key: str, request_hash: str, response: dict) -> None:
        stamp = self.clock()
        record = IdempotencyKey(identity_id=identity_id, route=route, key=key, request_hash=request_hash,
                                response=response, created_at=stamp,
                                expires_at=stamp + datetime.timedelta(hours=settings.IDEMPOTENCY_TTL_HOURS), )
        try:
            with atomic(self.session):
                self.repository.create(record)
        except IntegrityError:
            # A concurrent retry stored its response first; either copy is valid.
            logger.warning("Idempotency-Key {} for {} on {} was stored concurrently", key, identity_id, route)
