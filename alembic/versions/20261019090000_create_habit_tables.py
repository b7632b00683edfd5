"""create habit, completion and community tables

Revision ID: 20261019090000
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019090000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog, habit ledger and community tables."""
    op.create_table(
        'habit_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('kind', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('methods', sa.Text(), nullable=False),
        sa.Column('quote', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("kind IN ('build', 'break')", name='ck_habit_category_kind'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_habit_categories_id'), 'habit_categories', ['id'], unique=False)
    op.create_index(op.f('ix_habit_categories_kind'), 'habit_categories', ['kind'], unique=False)

    op.create_table(
        'user_habits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_user_id', sa.String(length=128), nullable=False),
        sa.Column('habit_category_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('best_streak', sa.Integer(), nullable=False),
        sa.Column('times_per_day', sa.Integer(), nullable=False),
        sa.Column('custom_amount', sa.Integer(), nullable=True),
        sa.Column('reminder_times', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.CheckConstraint('times_per_day >= 1', name='ck_user_habit_times_per_day'),
        sa.CheckConstraint('best_streak >= current_streak', name='ck_user_habit_best_streak'),
        sa.ForeignKeyConstraint(['habit_category_id'], ['habit_categories.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_habits_id'), 'user_habits', ['id'], unique=False)
    op.create_index(op.f('ix_user_habits_owner_user_id'), 'user_habits', ['owner_user_id'], unique=False)

    op.create_table(
        'habit_completions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_habit_id', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.CheckConstraint('amount >= 1', name='ck_completion_amount'),
        sa.ForeignKeyConstraint(['user_habit_id'], ['user_habits.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_habit_completions_id'), 'habit_completions', ['id'], unique=False)
    op.create_index('ix_habit_completions_habit_time', 'habit_completions',
                    ['user_habit_id', 'completed_at'], unique=False)

    op.create_table(
        'communities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('owner_user_id', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_communities_id'), 'communities', ['id'], unique=False)
    op.create_index(op.f('ix_communities_code'), 'communities', ['code'], unique=True)
    op.create_index(op.f('ix_communities_owner_user_id'), 'communities', ['owner_user_id'], unique=False)

    op.create_table(
        'community_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('community_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name='ck_community_member_status'),
        sa.ForeignKeyConstraint(['community_id'], ['communities.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('community_id', 'user_id', name='uq_community_member'),
    )
    op.create_index(op.f('ix_community_members_id'), 'community_members', ['id'], unique=False)
    op.create_index(op.f('ix_community_members_community_id'), 'community_members', ['community_id'], unique=False)
    op.create_index(op.f('ix_community_members_user_id'), 'community_members', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop all engine tables, children first."""
    op.drop_table('community_members')
    op.drop_table('communities')
    op.drop_table('habit_completions')
    op.drop_table('user_habits')
    op.drop_table('habit_categories')
