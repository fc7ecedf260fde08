"""initial_schema

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-18 10:12:41.530218

"""
from datetime import UTC, datetime
from typing import Sequence, Union
from uuid import uuid4

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


CATEGORIES = [
    ('ドラマ', '📺'),
    ('映画', '🎬'),
    ('アニメ', '🎞️'),
    ('本', '📚'),
    ('音楽', '🎵'),
    ('レストラン', '🍽️'),
    ('カフェ', '☕'),
    ('旅行', '✈️'),
    ('ゲーム', '🎮'),
    ('その他', '📦'),
]


def _id_column() -> sa.Column:
    return sa.Column('id', sa.String(length=36), nullable=False)


def upgrade() -> None:
    """Create every table and seed the category reference data."""
    op.create_table(
        'users',
        _id_column(),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('username', sa.String(length=10), nullable=True),
        sa.Column('display_id', sa.String(length=12), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ux_users_display_id', 'users', ['display_id'], unique=True)

    categories = op.create_table(
        'categories',
        _id_column(),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('icon', sa.String(length=50), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_categories_order_index', 'categories', ['order_index'])

    op.create_table(
        'review_groups',
        _id_column(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('category_id', sa.String(length=36), nullable=False),
        sa.Column('metadata_fields', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name='fk_review_groups_category_id'),
    )
    op.create_index('ix_review_groups_category_id', 'review_groups', ['category_id'])

    op.create_table(
        'review_group_members',
        _id_column(),
        sa.Column('review_group_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='member'),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_group_id'], ['review_groups.id'], name='fk_review_group_members_review_group_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_review_group_members_user_id'),
    )
    op.create_index('ix_review_group_members_group_user', 'review_group_members', ['review_group_id', 'user_id'])
    op.create_index('ix_review_group_members_user_id', 'review_group_members', ['user_id'])

    op.create_table(
        'evaluation_criteria',
        _id_column(),
        sa.Column('review_group_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_group_id'], ['review_groups.id'], name='fk_evaluation_criteria_review_group_id'),
    )
    op.create_index('ix_evaluation_criteria_review_group_id', 'evaluation_criteria', ['review_group_id'])

    op.create_table(
        'review_subjects',
        _id_column(),
        sa.Column('review_group_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_group_id'], ['review_groups.id'], name='fk_review_subjects_review_group_id'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_review_subjects_created_by'),
    )
    op.create_index('ix_review_subjects_review_group_id', 'review_subjects', ['review_group_id'])

    op.create_table(
        'reviews',
        _id_column(),
        sa.Column('review_subject_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('total_score', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_subject_id'], ['review_subjects.id'], name='fk_reviews_review_subject_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_reviews_user_id'),
    )
    op.create_index('ix_reviews_subject_user', 'reviews', ['review_subject_id', 'user_id'])
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])

    op.create_table(
        'evaluation_scores',
        _id_column(),
        sa.Column('review_id', sa.String(length=36), nullable=False),
        sa.Column('criteria_id', sa.String(length=36), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], name='fk_evaluation_scores_review_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['criteria_id'], ['evaluation_criteria.id'], name='fk_evaluation_scores_criteria_id'),
        sa.CheckConstraint('score BETWEEN 1 AND 5', name='ck_evaluation_scores_score_range'),
    )
    op.create_index('ix_evaluation_scores_review_id', 'evaluation_scores', ['review_id'])

    op.create_table(
        'invitations',
        _id_column(),
        sa.Column('review_group_id', sa.String(length=36), nullable=False),
        sa.Column('inviter_id', sa.String(length=36), nullable=False),
        sa.Column('invited_user_display_id', sa.String(length=12), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_group_id'], ['review_groups.id'], name='fk_invitations_review_group_id'),
        sa.ForeignKeyConstraint(['inviter_id'], ['users.id'], name='fk_invitations_inviter_id'),
    )
    op.create_index('ix_invitations_invited_user_display_id', 'invitations', ['invited_user_display_id'])
    op.create_index(
        'ix_invitations_group_display_status',
        'invitations',
        ['review_group_id', 'invited_user_display_id', 'status'],
    )

    now = datetime.now(UTC)
    op.bulk_insert(
        categories,
        [
            {'id': str(uuid4()), 'name': name, 'icon': icon, 'order_index': index, 'created_at': now}
            for index, (name, icon) in enumerate(CATEGORIES, start=1)
        ],
    )


def downgrade() -> None:
    """Drop every table."""
    op.drop_table('invitations')
    op.drop_table('evaluation_scores')
    op.drop_table('reviews')
    op.drop_table('review_subjects')
    op.drop_table('evaluation_criteria')
    op.drop_table('review_group_members')
    op.drop_table('review_groups')
    op.drop_table('categories')
    op.drop_table('users')
