"""
Idempotency key repository.
"""

from typing import Optional

from sqlmodel import Session, select

from app.models.idempotency_key import IdempotencyKey


class IdempotencyRepository:
    """Repository for IdempotencyKey database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, identity_id: str, route: str, key: str) -> Optional[IdempotencyKey]:
        statement = select(IdempotencyKey).where(IdempotencyKey.identity_id == identity_id,
                                                 IdempotencyKey.route == route, IdempotencyKey.key == key, )
        return self.session.exec(statement).first()

    def create(self, record: IdempotencyKey) -> IdempotencyKey:
        self.session.add(record)
        self.session.flush()
        self.session.refresh(record)
        return record

    def delete(self, record: IdempotencyKey) -> None:
        self.session.delete(record)
        self.session.flush()
