"""create_students_and_groups

Revision ID: 4c1d7e92a0b3
Revises:
Create Date: 2026-10-19 10:02:11.412087

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7e92a0b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create students and groups tables."""
    op.create_table('students',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('profile_picture', sa.String(length=500), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('interests', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('social_links', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_email', 'students', ['email'], unique=True)

    op.create_table('groups',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('group_type', sa.String(length=20), nullable=False, server_default='public'),
        sa.Column('privacy', sa.String(length=20), nullable=False, server_default='public'),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('admins', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('members', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('requests', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('resources', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('announcements', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('invite_code', sa.String(length=16), nullable=False),
        sa.Column('settings', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint("group_type IN ('public', 'private')", name='ck_groups_group_type'),
        sa.CheckConstraint("privacy IN ('public', 'private')", name='ck_groups_privacy'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invite_code', name='uq_groups_invite_code'),
    )
    op.create_index('ix_groups_owner_id', 'groups', ['owner_id'], unique=False)


def downgrade() -> None:
    """Drop groups and students tables."""
    op.drop_index('ix_groups_owner_id', table_name='groups')
    op.drop_table('groups')
    op.drop_index('ix_students_email', table_name='students')
    op.drop_table('students')
