"""Keep a permanent ledger of issued tracking ids

Revision ID: 8b2e4d6f1a37
Revises: 3f9c1a2b7d10
Create Date: 2026-10-18 15:40:07.118904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4d6f1a37'
down_revision: Union[str, Sequence[str], None] = '3f9c1a2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'issued_tracking_ids',
        sa.Column('tracking_id', sa.String(length=32), primary_key=True),
        sa.Column('issued_at', sa.DateTime(), nullable=False),
    )

    # Backfill from the issues that still exist
    op.execute(
        "INSERT INTO issued_tracking_ids (tracking_id, issued_at) "
        "SELECT tracking_id, created_at FROM issues"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('issued_tracking_ids')
