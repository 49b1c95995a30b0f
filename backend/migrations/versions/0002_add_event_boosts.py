"""Add boost columns to events

Revision ID: 8c4e1d2a9b57
Revises: 3f9a2c1b7d40
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8c4e1d2a9b57'
down_revision: Union[str, None] = '3f9a2c1b7d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('events', sa.Column('is_boosted', sa.Boolean(), nullable=True))
    op.add_column('events', sa.Column('boost_level', sa.Integer(), nullable=True))
    op.add_column('events', sa.Column('boost_until', sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    op.drop_column('events', 'boost_until')
    op.drop_column('events', 'boost_level')
    op.drop_column('events', 'is_boosted')
