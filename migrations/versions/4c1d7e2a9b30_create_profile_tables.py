"""create_profile_tables

Revision ID: 4c1d7e2a9b30
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d7e2a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles and profile_interests tables."""
    op.create_table('profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('gender_preferences', sa.JSON(), nullable=False),
        sa.Column('min_age', sa.Integer(), server_default='18', nullable=False),
        sa.Column('max_age', sa.Integer(), server_default='100', nullable=False),
        sa.Column('max_distance_km', sa.Float(), nullable=True),
        sa.Column('show_me', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_active_at', sa.DateTime(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.CheckConstraint('min_age < max_age', name='ck_profiles_age_range'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(
        'ix_profiles_candidate_scan',
        'profiles',
        ['is_active', 'show_me', 'gender', 'birth_date'],
        unique=False,
    )
    op.create_index('ix_profiles_location', 'profiles', ['latitude', 'longitude'], unique=False)

    op.create_table('profile_interests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('profile_id', sa.String(length=36), nullable=False),
        sa.Column('tag', sa.String(length=50), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profile_interests_tag', 'profile_interests', ['tag'], unique=False)
    op.create_index('ix_profile_interests_profile_id', 'profile_interests', ['profile_id'], unique=False)


def downgrade() -> None:
    """Drop profiles and profile_interests tables."""
    op.drop_index('ix_profile_interests_profile_id', table_name='profile_interests')
    op.drop_index('ix_profile_interests_tag', table_name='profile_interests')
    op.drop_table('profile_interests')
    op.drop_index('ix_profiles_location', table_name='profiles')
    op.drop_index('ix_profiles_candidate_scan', table_name='profiles')
    op.drop_table('profiles')
