"""
Idempotency key database model.

Remembers the response of a retried write so a client resending the same
``Idempotency-Key`` gets the first result back.  Keys are scoped by
identity and route.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


class IdempotencyKey(SQLModel, table=True):
    __tablename__ = "idempotency_keys"
    __table_args__ = (UniqueConstraint("identity_id", "route", "key", name="uq_idempotency_identity_route_key"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    identity_id: str = Field(nullable=False, max_length=64)
    route: str = Field(nullable=False, max_length=128)
    key: str = Field(nullable=False, max_length=128)

    # sha256 of the request payload; a reused key with another payload is a conflict.
    request_hash: str = Field(nullable=False, max_length=64)
    response: dict = Field(sa_column=Column(JSON, nullable=False))

    created_at: datetime.datetime = Field(default_factory=utcnow, sa_type=DateTime)
    expires_at: datetime.datetime = Field(nullable=False, index=True, sa_type=DateTime)

    def is_expired(self, moment: datetime.datetime) -> bool:
        return self.expires_at <= moment
