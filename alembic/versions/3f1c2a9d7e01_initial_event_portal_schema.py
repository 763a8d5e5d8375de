"""Initial event portal schema

Revision ID: 3f1c2a9d7e01
Revises: 
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(64), nullable=False, unique=True),
    )

    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('failed_access_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('lockout_end', sa.DateTime, nullable=True),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)
    op.create_index('ix_accounts_full_name', 'accounts', ['full_name'])

    op.create_table(
        'account_roles',
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), primary_key=True),
        sa.Column('role_id', sa.Integer, sa.ForeignKey('roles.id'), primary_key=True),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('location', sa.String(300), nullable=False),
        sa.Column('event_date', sa.DateTime, nullable=False),
        sa.Column('owner_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )
    op.create_index('idx_event_date', 'events', ['event_date'])
    op.create_index('idx_event_owner', 'events', ['owner_id'])
    op.create_index('idx_event_created_at', 'events', ['created_at'])

    # One registration per email per event
    op.create_table(
        'guests',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=False),
        sa.Column('event_id', sa.Integer, sa.ForeignKey('events.id'), nullable=False),
        sa.Column('registered_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('event_id', 'email', name='uq_guest_event_email'),
    )
    op.create_index('idx_guest_event', 'guests', ['event_id'])
    op.create_index('idx_guest_email', 'guests', ['email'])


def downgrade() -> None:
    op.drop_index('idx_guest_email', table_name='guests')
    op.drop_index('idx_guest_event', table_name='guests')
    op.drop_table('guests')

    op.drop_index('idx_event_created_at', table_name='events')
    op.drop_index('idx_event_owner', table_name='events')
    op.drop_index('idx_event_date', table_name='events')
    op.drop_table('events')

    op.drop_table('account_roles')

    op.drop_index('ix_accounts_full_name', table_name='accounts')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')

    op.drop_table('roles')
