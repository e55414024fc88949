"""Create users, event types, bookings and integration tables

Revision ID: 1c4e7b2a9d10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1c4e7b2a9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('time_zone', sa.String(), nullable=True, server_default='Europe/London'),
        sa.Column('week_start', sa.String(), nullable=True, server_default='Sunday'),
        sa.Column('locale', sa.String(), nullable=True),
        sa.Column('theme', sa.String(), nullable=True),
        sa.Column('hide_branding', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('start_time', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('end_time', sa.Integer(), nullable=True, server_default='1440'),
        sa.Column('buffer_time', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('plan', sa.String(), nullable=True, server_default='TRIAL'),
        sa.Column('completed_onboarding', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('identity_provider', sa.String(), nullable=True, server_default='CAL'),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'event_types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('length', sa.Integer(), nullable=False),
        sa.Column('scheduling_type', sa.String(), nullable=True),
        sa.Column('requires_confirmation', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('disable_guests', sa.Boolean(), nullable=True, server_default='false'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'event_type_users',
        sa.Column('event_type_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['event_type_id'], ['event_types.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('event_type_id', 'user_id'),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('uid', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('event_type_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('agreed_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('rejected', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('customer_confirmed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['event_type_id'], ['event_types.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uid'),
        # confirmed and rejected are mutually exclusive
        sa.CheckConstraint('NOT (confirmed AND rejected)', name='ck_bookings_single_outcome'),
    )
    op.create_index('idx_bookings_user_id', 'bookings', ['user_id'])

    op.create_table(
        'attendees',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('time_zone', sa.String(), nullable=False),
        sa.Column('locale', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_id', 'email', name='uq_attendees_booking_email'),
    )

    op.create_table(
        'booking_references',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('uid', sa.String(), nullable=False),
        sa.Column('meeting_id', sa.String(), nullable=True),
        sa.Column('meeting_password', sa.String(), nullable=True),
        sa.Column('meeting_url', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('uid', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(), nullable=False, server_default='usd'),
        sa.Column('success', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('refunded', sa.Boolean(), nullable=True, server_default='false'),
        sa.Column('external_id', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uid'),
    )

    op.create_table(
        'credentials',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('key', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_credentials_user_id', 'credentials', ['user_id'])

    op.create_table(
        'destination_calendars',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('integration', sa.String(), nullable=False),
        sa.Column('external_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.UniqueConstraint('booking_id'),
    )

    op.create_table(
        'webhooks',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('subscriber_url', sa.String(), nullable=False),
        sa.Column('payload_template', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('event_triggers', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_webhooks_user_id', 'webhooks', ['user_id'])


def downgrade() -> None:
    op.drop_index('idx_webhooks_user_id', table_name='webhooks')
    op.drop_table('webhooks')
    op.drop_table('destination_calendars')
    op.drop_index('idx_credentials_user_id', table_name='credentials')
    op.drop_table('credentials')
    op.drop_table('payments')
    op.drop_table('booking_references')
    op.drop_table('attendees')
    op.drop_index('idx_bookings_user_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('event_type_users')
    op.drop_table('event_types')
    op.drop_table('users')
