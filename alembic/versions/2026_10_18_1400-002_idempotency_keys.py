"""Stored responses for Idempotency-Key retries

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 14:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the idempotency_keys table."""
    op.create_table('idempotency_keys', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('identity_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('route', sqlmodel.sql.sqltypes.AutoString(length=128), nullable=False),
        sa.Column('key', sqlmodel.sql.sqltypes.AutoString(length=128), nullable=False),
        sa.Column('request_hash', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('response', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('identity_id', 'route', 'key', name='uq_idempotency_identity_route_key'))
    op.create_index(op.f('ix_idempotency_keys_expires_at'), 'idempotency_keys', ['expires_at'])


def downgrade() -> None:
    """Drop the idempotency_keys table."""
    op.drop_index(op.f('ix_idempotency_keys_expires_at'), table_name='idempotency_keys')
    op.drop_table('idempotency_keys')
