"""create messaging schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:12:44.118204

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Step 1: Create tables
    op.execute("""
        CREATE TABLE IF NOT EXISTS conversations (
            id SERIAL PRIMARY KEY,
            participant_low INTEGER NOT NULL,
            participant_high INTEGER NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
            last_activity_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_conversations_pair UNIQUE (participant_low, participant_high),
            CONSTRAINT ck_conversations_pair_order CHECK (participant_low < participant_high)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS conversation_participants (
            id SERIAL PRIMARY KEY,
            conversation_id INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            participant_id INTEGER NOT NULL,
            hidden_since TIMESTAMP WITH TIME ZONE,
            last_read_message_id BIGINT,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            CONSTRAINT uq_participants_membership UNIQUE (conversation_id, participant_id)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS messages (
            id SERIAL PRIMARY KEY,
            conversation_id INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            sender_id INTEGER NOT NULL,
            content VARCHAR(4000) NOT NULL DEFAULT '',
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS message_attachments (
            id SERIAL PRIMARY KEY,
            message_id INTEGER NOT NULL UNIQUE REFERENCES messages(id) ON DELETE CASCADE,
            original_name VARCHAR(255) NOT NULL,
            media_type VARCHAR(100) NOT NULL,
            size_bytes BIGINT NOT NULL,
            data BYTEA NOT NULL
        )
    """)

    # Step 2: Create indexes
    op.execute('CREATE INDEX IF NOT EXISTS idx_messages_conversation_id_id ON messages(conversation_id, id)')
    op.execute('CREATE INDEX IF NOT EXISTS ix_conversation_participants_conversation_id ON conversation_participants(conversation_id)')
    op.execute('CREATE INDEX IF NOT EXISTS ix_conversation_participants_participant_id ON conversation_participants(participant_id)')
    op.execute('CREATE INDEX IF NOT EXISTS idx_conversations_last_activity ON conversations(last_activity_at DESC)')


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS message_attachments')
    op.execute('DROP TABLE IF EXISTS messages')
    op.execute('DROP TABLE IF EXISTS conversation_participants')
    op.execute('DROP TABLE IF EXISTS conversations')
