"""Initial schema: issues, events, user_roles

Revision ID: 3f9c1a2b7d10
Revises:
Create Date: 2026-10-18 09:12:41.503217

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATEGORIES = (
    'Road & Transportation',
    'Water & Sanitation',
    'Public Safety',
    'Parks & Recreation',
    'Utilities',
    'Waste Management',
    'Street Lighting',
    'Public Buildings',
    'Other',
)
PRIORITIES = ('Low', 'Medium', 'High', 'Critical')
STATUSES = ('Pending', 'In Progress', 'Resolved', 'Rejected')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'issues',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tracking_id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.Enum(*CATEGORIES, name='issue_category'), nullable=False),
        sa.Column('priority', sa.Enum(*PRIORITIES, name='issue_priority'), nullable=False, server_default='Medium'),
        sa.Column('status', sa.Enum(*STATUSES, name='issue_status'), nullable=False, server_default='Pending'),
        sa.Column('location', sa.Text(), nullable=False, server_default=''),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('video_urls', sa.JSON(), nullable=False),
        sa.Column('upvotes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_id', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('upvotes >= 0', name='ck_issues_upvotes_non_negative'),
        sa.CheckConstraint('created_at <= updated_at', name='ck_issues_updated_after_created'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_issues_tracking_id', 'issues', ['tracking_id'], unique=True)
    op.create_index('ix_issues_category', 'issues', ['category'])
    op.create_index('ix_issues_status', 'issues', ['status'])
    op.create_index('ix_issues_created_at', 'issues', ['created_at'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('issue_id', sa.Integer(), sa.ForeignKey('issues.id'), nullable=False),
        sa.Column('event_type', sa.Enum('created', 'status_changed', 'upvoted', name='event_type'), nullable=False),
        sa.Column('actor', sa.String(length=100), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_events_issue_id', 'events', ['issue_id'])

    op.create_table(
        'user_roles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('role', sa.Enum('admin', name='app_role'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'role', name='unique_user_role'),
    )
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_user_roles_user_id', table_name='user_roles')
    op.drop_table('user_roles')
    op.drop_index('ix_events_issue_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_issues_created_at', table_name='issues')
    op.drop_index('ix_issues_status', table_name='issues')
    op.drop_index('ix_issues_category', table_name='issues')
    op.drop_index('ix_issues_tracking_id', table_name='issues')
    op.drop_table('issues')
