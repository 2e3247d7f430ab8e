"""create_rhythm_tables

Revision ID: 5b2d9c41e7a3
Revises:
Create Date: 2026-01-12 19:04:11.482913

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b2d9c41e7a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('timezone', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('subcategory', sa.String(length=100), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('timezone', sa.String(length=50), nullable=False),
        sa.Column('data', JSON_TYPE, nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_entries_user_timestamp', 'entries', ['user_id', 'timestamp'], unique=False)
    op.create_index('idx_entries_category', 'entries', ['category'], unique=False)
    op.create_index('idx_entries_type', 'entries', ['type'], unique=False)
    op.create_index(op.f('ix_entries_id'), 'entries', ['id'], unique=False)

    op.create_table(
        'rhythms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('match_type', sa.String(length=50), nullable=True),
        sa.Column('match_category', sa.String(length=100), nullable=True),
        sa.Column('match_subcategory', sa.String(length=100), nullable=True),
        sa.Column('match_name', sa.String(length=255), nullable=True),
        sa.Column('goal_type', sa.String(length=50), nullable=False),
        sa.Column('goal_value', sa.Integer(), nullable=False),
        sa.Column('goal_unit', sa.String(length=50), nullable=True),
        sa.Column('frequency', sa.String(length=50), nullable=False),
        sa.Column('frequency_target', sa.Integer(), nullable=True),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('longest_streak', sa.Integer(), nullable=False),
        sa.Column('last_completed_date', sa.Date(), nullable=True),
        sa.Column('duration_threshold_seconds', sa.Integer(), nullable=False),
        sa.Column('chain_type', sa.String(length=50), nullable=False),
        sa.Column('chain_target_minutes', sa.Integer(), nullable=True),
        sa.Column('cached_chain_stats', JSON_TYPE, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_rhythms_user_id', 'rhythms', ['user_id'], unique=False)
    op.create_index(op.f('ix_rhythms_id'), 'rhythms', ['id'], unique=False)

    op.create_table(
        'encouragements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('stage', sa.String(length=50), nullable=False),
        sa.Column('context', sa.String(length=50), nullable=False),
        sa.Column('activity_type', sa.String(length=100), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('tier_name', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_encouragements_stage_context', 'encouragements', ['stage', 'context'], unique=False)
    op.create_index(op.f('ix_encouragements_id'), 'encouragements', ['id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_encouragements_id'), table_name='encouragements')
    op.drop_index('idx_encouragements_stage_context', table_name='encouragements')
    op.drop_table('encouragements')
    op.drop_index(op.f('ix_rhythms_id'), table_name='rhythms')
    op.drop_index('idx_rhythms_user_id', table_name='rhythms')
    op.drop_table('rhythms')
    op.drop_index(op.f('ix_entries_id'), table_name='entries')
    op.drop_index('idx_entries_type', table_name='entries')
    op.drop_index('idx_entries_category', table_name='entries')
    op.drop_index('idx_entries_user_timestamp', table_name='entries')
    op.drop_table('entries')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
