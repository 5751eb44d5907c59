"""create inbox tables

Revision ID: 3f9a1c2e7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates users, customers, conversations, messages and notifications. The
partial unique index on conversations keeps at most one open conversation
per customer and platform.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the inbox schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='staff'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("role IN ('admin', 'staff')", name='ck_users_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'customers',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('platform_user_id', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('platform', 'platform_user_id', name='uq_customer_platform_user'),
        sa.CheckConstraint("platform IN ('whatsapp', 'instagram')", name='ck_customers_platform'),
    )
    op.create_index('ix_customer_platform', 'customers', ['platform'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('assigned_to', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint("platform IN ('whatsapp', 'instagram')", name='ck_conversations_platform'),
        sa.CheckConstraint("status IN ('open', 'resolved')", name='ck_conversations_status'),
    )
    op.create_index('ix_conversation_customer_id', 'conversations', ['customer_id'])
    op.create_index('ix_conversation_status', 'conversations', ['status'])
    op.create_index('ix_conversation_assigned_to', 'conversations', ['assigned_to'])
    op.create_index('ix_conversation_platform', 'conversations', ['platform'])
    op.create_index('ix_conversation_updated_at', 'conversations', ['updated_at'])
    op.create_index(
        'uq_conversation_open_per_customer',
        'conversations',
        ['customer_id', 'platform'],
        unique=True,
        postgresql_where=sa.text("status = 'open'"),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('conversation_id', sa.UUID(), nullable=False),
        sa.Column('sender_type', sa.String(20), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='CASCADE'),
        sa.CheckConstraint("sender_type IN ('customer', 'staff')", name='ck_messages_sender_type'),
        sa.CheckConstraint("platform IN ('whatsapp', 'instagram')", name='ck_messages_platform'),
    )
    op.create_index('ix_message_conversation_id', 'messages', ['conversation_id'])
    op.create_index('ix_message_created_at', 'messages', ['created_at'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('conversation_id', sa.UUID(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False, server_default='assignment'),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_notification_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notification_is_read', 'notifications', ['is_read'])


def downgrade() -> None:
    """Drop the inbox schema."""
    op.drop_index('ix_notification_is_read', table_name='notifications')
    op.drop_index('ix_notification_user_id', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_message_created_at', table_name='messages')
    op.drop_index('ix_message_conversation_id', table_name='messages')
    op.drop_table('messages')

    op.drop_index('uq_conversation_open_per_customer', table_name='conversations')
    op.drop_index('ix_conversation_updated_at', table_name='conversations')
    op.drop_index('ix_conversation_platform', table_name='conversations')
    op.drop_index('ix_conversation_assigned_to', table_name='conversations')
    op.drop_index('ix_conversation_status', table_name='conversations')
    op.drop_index('ix_conversation_customer_id', table_name='conversations')
    op.drop_table('conversations')

    op.drop_index('ix_customer_platform', table_name='customers')
    op.drop_table('customers')

    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
