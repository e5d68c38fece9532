"""create_groups_and_checkins

Revision ID: a7c3e91f0b24
Revises:
Create Date: 2025-01-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a7c3e91f0b24'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
    )
    # Codes are globally unique; CreateGroup relies on this to detect collisions
    op.create_index('ix_groups_code', 'groups', ['code'], unique=True)

    op.create_table(
        'checkins',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('group_code', sa.String(length=6),
                  sa.ForeignKey('groups.code', ondelete='CASCADE'), nullable=False),
        sa.Column('device_id', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=100), nullable=False),
        sa.Column('place_id', sa.String(length=255), nullable=False),
        sa.Column('place_name', sa.String(length=255), nullable=False),
        sa.Column('place_coords', sa.JSON(), nullable=True),
        sa.Column('checked_in_at', sa.BigInteger(), nullable=False),
        sa.Column('checked_out_at', sa.BigInteger(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('accommodation_place_id', sa.String(length=255), nullable=True),
        sa.Column('accommodation_coords', sa.JSON(), nullable=True),
        sa.Column('accommodation_name', sa.String(length=255), nullable=True),
        sa.Column('display_accommodation_to_group', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('scheduled_for', sa.BigInteger(), nullable=True),
        sa.Column('meetup_note', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_checkins_group_active', 'checkins', ['group_code', 'is_active'])
    op.create_index('idx_checkins_group_device_time', 'checkins',
                    ['group_code', 'device_id', 'checked_in_at'])
    op.create_index('idx_checkins_time', 'checkins', ['checked_in_at'])


def downgrade():
    op.drop_index('idx_checkins_time', table_name='checkins')
    op.drop_index('idx_checkins_group_device_time', table_name='checkins')
    op.drop_index('idx_checkins_group_active', table_name='checkins')
    op.drop_table('checkins')
    op.drop_index('ix_groups_code', table_name='groups')
    op.drop_table('groups')
