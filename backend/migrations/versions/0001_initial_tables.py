"""create users, campaigns, donations and volunteers

Revision ID: 0001_initial_tables
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=100), nullable=True),
        sa.Column('google_id', sa.String(length=100), nullable=True),
        sa.Column('facebook_id', sa.String(length=100), nullable=True),
        sa.Column('avatar', sa.String(), nullable=False),
        sa.Column('provider', sa.Enum('local', 'google', 'facebook', name='signinproviders'), nullable=False),
        sa.Column('role', sa.Enum('user', 'admin', name='userroles'), nullable=False),
        sa.Column('is_blocked', sa.Boolean(), nullable=False),
        sa.Column('reset_token', sa.String(length=20), nullable=True),
        sa.Column('reset_token_expiry', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('google_id'),
        sa.UniqueConstraint('facebook_id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'campaigns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('target_amount', sa.Float(), nullable=False),
        sa.Column('current_amount', sa.Float(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('type', sa.Enum('campaign', 'crowdfunding', name='campaigntypes'), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('organizer_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'approved', 'rejected', name='campaignstatus'), nullable=False),
        sa.Column('documents', sa.JSON(), nullable=False),
        sa.Column('rejection_reason', sa.String(), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(['organizer_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_campaigns_type', 'campaigns', ['type'])
    op.create_index('ix_campaigns_status', 'campaigns', ['status'])
    op.create_index('ix_campaigns_organizer_id', 'campaigns', ['organizer_id'])

    op.create_table(
        'donations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('type', sa.Enum('once', 'monthly', name='donationtypes'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False),
        sa.Column('reminder', sa.Boolean(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('campaign_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_donations_date', 'donations', ['date'])
    op.create_index('ix_donations_user_id', 'donations', ['user_id'])
    op.create_index('ix_donations_campaign_id', 'donations', ['campaign_id'])

    op.create_table(
        'volunteers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('campaign_id', sa.Integer(), nullable=True),
        sa.Column('availability', sa.Enum('weekdays', 'weekends', 'any', name='volunteeravailability'), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum('active', 'archived', name='volunteerstatus'), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_volunteers_user_id', 'volunteers', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_volunteers_user_id', table_name='volunteers')
    op.drop_table('volunteers')
    op.drop_index('ix_donations_campaign_id', table_name='donations')
    op.drop_index('ix_donations_user_id', table_name='donations')
    op.drop_index('ix_donations_date', table_name='donations')
    op.drop_table('donations')
    op.drop_index('ix_campaigns_organizer_id', table_name='campaigns')
    op.drop_index('ix_campaigns_status', table_name='campaigns')
    op.drop_index('ix_campaigns_type', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    for enum_name in (
        'volunteerstatus',
        'volunteeravailability',
        'donationtypes',
        'campaignstatus',
        'campaigntypes',
        'userroles',
        'signinproviders',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
