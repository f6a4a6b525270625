"""create_localgigs_users_table

Revision ID: 4b7d1e2a9c30
Revises:
Create Date: 2026-10-17 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b7d1e2a9c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the user profile key-value table."""
    op.create_table('localgigs',
        sa.Column('userID', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), server_default='', nullable=False),
        sa.Column('email', sa.String(length=255), server_default='', nullable=False),
        sa.Column('preferences', postgresql.JSONB(astext_type=sa.Text()), server_default='{}', nullable=True),
        sa.Column('profile_picture_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('joined_events', postgresql.JSONB(astext_type=sa.Text()), server_default='[]', nullable=True),
        sa.Column('created_at', sa.String(length=40), nullable=False),
        sa.PrimaryKeyConstraint('userID'),
    )
    # Email is the secondary lookup key
    op.create_index('ix_localgigs_email', 'localgigs', ['email'], unique=False)


def downgrade() -> None:
    """Drop the user profile table."""
    op.drop_index('ix_localgigs_email', table_name='localgigs')
    op.drop_table('localgigs')
