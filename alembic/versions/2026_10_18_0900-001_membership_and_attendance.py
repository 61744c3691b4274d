"""Membership, sessions, attendance, leave and audit tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PENDING = sa.text("status = 'pending'")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
    ]


def upgrade() -> None:
    """Create club, people, application, session, attendance, leave and audit tables."""
    op.create_table('clubs', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('sport_category', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_clubs_sport_category'), 'clubs', ['sport_category'])

    op.create_table('members', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('identity_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('access_flag', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('nickname', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('phone_number', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('health_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('identity_id', 'club_id', name='uq_members_identity_club'))
    op.create_index(op.f('ix_members_identity_id'), 'members', ['identity_id'])
    op.create_index(op.f('ix_members_club_id'), 'members', ['club_id'])

    op.create_table('coaches', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('identity_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_coaches_identity_id'), 'coaches', ['identity_id'], unique=True)
    op.create_index(op.f('ix_coaches_club_id'), 'coaches', ['club_id'])

    op.create_table('membership_applications', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), nullable=False),
        sa.Column('identity_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('personal_info', sa.JSON(), nullable=False),
        sa.Column('documents', sa.JSON(), nullable=False),
        sa.Column('activity_log', sa.JSON(), nullable=False),
        sa.Column('reviewed_by', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('review_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('rejection_reason', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('requested_changes', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_membership_applications_member_id'), 'membership_applications', ['member_id'])
    op.create_index(op.f('ix_membership_applications_club_id'), 'membership_applications', ['club_id'])
    op.create_index(op.f('ix_membership_applications_status'), 'membership_applications', ['status'])
    op.create_index('uq_applications_pending_member_club', 'membership_applications', ['member_id', 'club_id'],
                    unique=True, postgresql_where=PENDING, sqlite_where=PENDING)

    op.create_table('training_sessions', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('coach_id', sa.Integer(), sa.ForeignKey('coaches.id'), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_training_sessions_club_id'), 'training_sessions', ['club_id'])
    op.create_index(op.f('ix_training_sessions_coach_id'), 'training_sessions', ['coach_id'])
    op.create_index(op.f('ix_training_sessions_session_date'), 'training_sessions', ['session_date'])

    op.create_table('attendance_records', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('training_sessions.id'), nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('check_in_time', sa.DateTime(), nullable=True),
        sa.Column('check_in_method', sa.String(length=20), nullable=False, server_default='manual'),
        sa.Column('marked_by', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'member_id', name='uq_attendance_session_member'))
    op.create_index(op.f('ix_attendance_records_session_id'), 'attendance_records', ['session_id'])
    op.create_index(op.f('ix_attendance_records_member_id'), 'attendance_records', ['member_id'])
    op.create_index(op.f('ix_attendance_records_club_id'), 'attendance_records', ['club_id'])

    op.create_table('leave_requests', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('training_sessions.id'), nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), nullable=False),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('requested_by', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('reviewed_by', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('review_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_leave_requests_session_id'), 'leave_requests', ['session_id'])
    op.create_index(op.f('ix_leave_requests_member_id'), 'leave_requests', ['member_id'])
    op.create_index(op.f('ix_leave_requests_club_id'), 'leave_requests', ['club_id'])
    op.create_index(op.f('ix_leave_requests_status'), 'leave_requests', ['status'])
    op.create_index('uq_leave_pending_session_member', 'leave_requests', ['session_id', 'member_id'], unique=True,
                    postgresql_where=PENDING, sqlite_where=PENDING)

    op.create_table('audit_logs', sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('actor_role', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column('club_id', sa.Integer(), nullable=True),
        sa.Column('action_type', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('entity_type', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('entity_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_audit_logs_actor_id'), 'audit_logs', ['actor_id'])
    op.create_index(op.f('ix_audit_logs_club_id'), 'audit_logs', ['club_id'])
    op.create_index(op.f('ix_audit_logs_action_type'), 'audit_logs', ['action_type'])
    op.create_index(op.f('ix_audit_logs_entity_type'), 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_created_at_id', 'audit_logs', ['created_at', 'id'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in ('audit_logs', 'leave_requests', 'attendance_records', 'training_sessions',
                  'membership_applications', 'coaches', 'members', 'clubs'):
        op.drop_table(table)
