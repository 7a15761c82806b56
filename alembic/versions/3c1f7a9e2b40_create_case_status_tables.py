"""create_case_status_tables

Revision ID: 3c1f7a9e2b40
Revises:
Create Date: 2026-10-19 10:12:44.318205

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c1f7a9e2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    op.create_table(
        'admin_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False, server_default=''),
        sa.Column('role', sa.String(20), nullable=False, server_default='admin'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'immigration_cases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('registration_number', sa.String(20), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('nationality', sa.String(2), nullable=False),
        sa.Column('cause_list_date', sa.Date(), nullable=True),
        sa.Column('appeal_received_date', sa.Date(), nullable=True),
        sa.Column('appeal_status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('brief_status_respondent', sa.Text(), nullable=True),
        sa.Column('brief_status_dhs', sa.Text(), nullable=True),
        sa.Column('court_address', sa.Text(), nullable=True),
        sa.Column('court_phone', sa.String(50), nullable=True),
        sa.Column('next_hearing_date', sa.Date(), nullable=True),
        sa.Column('next_hearing_info', sa.Text(), nullable=True),
        sa.Column('judicial_decision', sa.Text(), nullable=True),
        sa.Column('decision_date', sa.Date(), nullable=True),
        sa.Column('decision_court_address', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_immigration_cases_registration_number'),
        'immigration_cases',
        ['registration_number'],
        unique=True,
    )
    op.create_index(
        'ix_immigration_cases_lookup',
        'immigration_cases',
        ['registration_number', 'nationality'],
        unique=False,
    )
    op.create_index(
        op.f('ix_immigration_cases_appeal_status'), 'immigration_cases', ['appeal_status'], unique=False
    )
    op.create_index(
        op.f('ix_immigration_cases_next_hearing_date'),
        'immigration_cases',
        ['next_hearing_date'],
        unique=False,
    )

    op.create_table(
        'case_notes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('case_id', sa.Uuid(), nullable=False),
        sa.Column('admin_id', sa.Uuid(), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['case_id'], ['immigration_cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_case_notes_case_id'), 'case_notes', ['case_id'], unique=False)

    op.create_table(
        'admin_audit_log',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('admin_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('resource_type', sa.String(30), nullable=False),
        sa.Column('resource_id', sa.String(100), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admin_audit_log_admin_id'), 'admin_audit_log', ['admin_id'], unique=False)
    op.create_index(
        op.f('ix_admin_audit_log_created_at'), 'admin_audit_log', ['created_at'], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_admin_audit_log_created_at'), table_name='admin_audit_log')
    op.drop_index(op.f('ix_admin_audit_log_admin_id'), table_name='admin_audit_log')
    op.drop_table('admin_audit_log')
    op.drop_index(op.f('ix_case_notes_case_id'), table_name='case_notes')
    op.drop_table('case_notes')
    op.drop_index(op.f('ix_immigration_cases_next_hearing_date'), table_name='immigration_cases')
    op.drop_index(op.f('ix_immigration_cases_appeal_status'), table_name='immigration_cases')
    op.drop_index('ix_immigration_cases_lookup', table_name='immigration_cases')
    op.drop_index(op.f('ix_immigration_cases_registration_number'), table_name='immigration_cases')
    op.drop_table('immigration_cases')
    op.drop_table('admin_users')
    op.drop_index(op.f('ix_users_is_active'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
