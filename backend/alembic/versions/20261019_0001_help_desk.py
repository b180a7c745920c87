"""create users, help_requests and help_responses

Revision ID: 20261019_help_desk
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_help_desk'
down_revision = None
branch_labels = None
depends_on = None

user_type = sa.Enum('member', 'moderator', 'admin', name='user_type')
help_request_type = sa.Enum('medical', 'travel', 'safety', 'other', name='help_request_type')
help_request_status = sa.Enum('active', 'resolved', 'closed', name='help_request_status')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_image_url', sa.String(length=512), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('user_type', user_type, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'help_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('requester_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', help_request_type, nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('urgency_level', sa.Integer(), nullable=False),
        sa.Column('status', help_request_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('urgency_level BETWEEN 1 AND 5', name='ck_help_requests_urgency_level'),
        sa.ForeignKeyConstraint(['requester_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_help_requests_requester_id', 'help_requests', ['requester_id'])
    op.create_index('ix_help_requests_listing', 'help_requests', ['status', 'urgency_level', 'created_at'])

    op.create_table(
        'help_responses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('help_request_id', sa.Uuid(), nullable=False),
        sa.Column('responder_id', sa.Uuid(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_accepted', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['help_request_id'], ['help_requests.id']),
        sa.ForeignKeyConstraint(['responder_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_help_responses_help_request_id', 'help_responses', ['help_request_id'])
    op.create_index('ix_help_responses_responder_id', 'help_responses', ['responder_id'])


def downgrade():
    op.drop_index('ix_help_responses_responder_id', table_name='help_responses')
    op.drop_index('ix_help_responses_help_request_id', table_name='help_responses')
    op.drop_table('help_responses')
    op.drop_index('ix_help_requests_listing', table_name='help_requests')
    op.drop_index('ix_help_requests_requester_id', table_name='help_requests')
    op.drop_table('help_requests')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    help_request_status.drop(op.get_bind(), checkfirst=True)
    help_request_type.drop(op.get_bind(), checkfirst=True)
    user_type.drop(op.get_bind(), checkfirst=True)
