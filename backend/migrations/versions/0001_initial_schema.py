"""Initial schema: places, events, event_attendees, checkins

Revision ID: 3f9a2c1b7d40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f9a2c1b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy Enum columns store member names
DATA_SOURCE = sa.Enum('MANUAL', 'SIMULATED', 'USER_CHECKINS', name='datasource')
EVENT_STATUS = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='eventstatus')


def upgrade() -> None:
    op.create_table(
        'places',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('google_place_id', sa.String(255), nullable=True, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Double(), nullable=False),
        sa.Column('longitude', sa.Double(), nullable=False),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('user_ratings_total', sa.Integer(), nullable=True),
        sa.Column('opening_hours', postgresql.JSONB(none_as_null=True), nullable=True),
        sa.Column('popular_times', postgresql.JSONB(none_as_null=True), nullable=True),
        sa.Column('data_source', DATA_SOURCE, nullable=True),
        sa.Column('popular_times_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('venue_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('places.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('creator_id', sa.String(128), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(20), nullable=True),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', EVENT_STATUS, nullable=True, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'event_attendees',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('event_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        'idx_event_attendees_event_user',
        'event_attendees',
        ['event_id', 'user_id'],
        unique=True
    )

    op.create_table(
        'checkins',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('venue_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('places.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('user_id', sa.String(128), nullable=True),
        sa.Column('session_id', sa.String(128), nullable=True),
        sa.Column('latitude', sa.Double(), nullable=False),
        sa.Column('longitude', sa.Double(), nullable=False),
        sa.Column('is_anonymous', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, index=True),
    )


def downgrade() -> None:
    op.drop_table('checkins')
    op.drop_index('idx_event_attendees_event_user', table_name='event_attendees')
    op.drop_table('event_attendees')
    op.drop_table('events')
    op.drop_table('places')
    EVENT_STATUS.drop(op.get_bind(), checkfirst=True)
    DATA_SOURCE.drop(op.get_bind(), checkfirst=True)
