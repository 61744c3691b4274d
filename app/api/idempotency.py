"""
``Idempotency-Key`` support for retry-prone endpoints.

Usage in an endpoint::

    call: IdempotentCall = Depends(Idempotency("leave-requests:create"))
    cached = call.replay(payload)
    if cached is not None:
        return cached
    result = service.do_it(...)
    call.remember(result)
    return result

Without the header both calls are no-ops.
"""

from typing import Any, Optional

from fastapi import Depends, Header, Response
from fastapi.encoders import jsonable_encoder
from sqlmodel import Session

from app.api.dependencies import get_current_actor
from app.db.session import get_db
from app.schemas.actor import Actor
from app.services.idempotency_service import IdempotencyService, fingerprint

CACHED_HEADER = "X-Idempotency-Cached"


class IdempotentCall:
    def __init__(self, service: IdempotencyService, identity_id: str, route: str, key: Optional[str],
                 response: Response):
        self.service = service
        self.identity_id = identity_id
        self.route = route
        self.key = key
        self.response = response
        self.request_hash: Optional[str] = None

    def replay(self, payload: Any) -> Optional[dict]:
        if self.key is None:
            return None
        self.request_hash = fingerprint(jsonable_encoder(payload))
        cached = self.service.replay(self.identity_id, self.route, self.key, self.request_hash)
        if cached is not None:
            self.response.headers[CACHED_HEADER] = "true"
        return cached

    def remember(self, result: Any) -> None:
        if self.key is None or self.request_hash is None:
            return
        self.service.remember(self.identity_id, self.route, self.key, self.request_hash, jsonable_encoder(result))


class Idempotency:
    """Dependency factory; ``route`` namespaces the keys of one endpoint."""

    def __init__(self, route: str):
        self.route = route

    def __call__(self, response: Response,
                 idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
                 db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor), ) -> IdempotentCall:
        return IdempotentCall(IdempotencyService(db), actor.identity_id, self.route, idempotency_key, response)
