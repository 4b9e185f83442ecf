from unittest.mock import patch

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from direct_messaging import config, database
from direct_messaging.database import engine_options
from direct_messaging.models.db.attachment_model import AttachmentModel
from direct_messaging.models.db.conversation_model import ConversationModel
from direct_messaging.models.db.message_model import MessageModel
from direct_messaging.models.db.participant_model import ParticipantModel


@pytest.mark.asyncio
async def test_database_connection(test_db: AsyncSession) -> None:
    """Test that we can connect to the database."""
    result = await test_db.execute(text("SELECT 1"))
    assert result.scalar() == 1


@pytest.mark.asyncio
async def test_database_tables_exist(test_engine: AsyncEngine) -> None:
    """Test that required tables exist."""
    async with test_engine.connect() as conn:
        table_names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names()
        )

    assert "conversations" in table_names
    assert "conversation_participants" in table_names
    assert "messages" in table_names
    assert "message_attachments" in table_names


@pytest.mark.asyncio
async def test_pair_uniqueness_is_enforced_by_storage(test_db: AsyncSession) -> None:
    """Test that the canonical pair can only be stored once."""
    test_db.add(ConversationModel(participant_low=1, participant_high=2))
    await test_db.commit()

    test_db.add(ConversationModel(participant_low=1, participant_high=2))
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()


@pytest.mark.asyncio
async def test_membership_uniqueness_is_enforced_by_storage(
    test_db: AsyncSession,
) -> None:
    """Test that a participant has at most one membership per conversation."""
    conversation = ConversationModel(participant_low=1, participant_high=2)
    test_db.add(conversation)
    await test_db.flush()

    test_db.add(ParticipantModel(conversation_id=conversation.id, participant_id=1))
    await test_db.commit()

    test_db.add(ParticipantModel(conversation_id=conversation.id, participant_id=1))
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()


@pytest.mark.asyncio
async def test_one_attachment_per_message(test_db: AsyncSession) -> None:
    """Test that a second attachment row for the same message is refused."""
    conversation = ConversationModel(participant_low=1, participant_high=2)
    test_db.add(conversation)
    await test_db.flush()
    message = MessageModel(conversation_id=conversation.id, sender_id=1, content="")
    test_db.add(message)
    await test_db.flush()

    for _ in range(2):
        test_db.add(
            AttachmentModel(
                message_id=message.id,
                original_name="a.pdf",
                media_type="application/pdf",
                size_bytes=1,
                data=b"x",
            )
        )
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()


def test_engine_options_for_sqlite() -> None:
    """Test that SQLite engines skip server pool settings."""
    options = engine_options("sqlite+aiosqlite:///:memory:")
    assert options == {"connect_args": {"check_same_thread": False}}


def test_engine_options_for_postgres() -> None:
    """Test that server databases get a pre-pinged, bounded pool."""
    with patch.dict("os.environ", {"DB_POOL_SIZE": "8"}):
        options = engine_options("postgresql+asyncpg://u:p@db/messaging")
    assert options["pool_pre_ping"] is True
    assert options["pool_size"] == 8
    assert options["max_overflow"] == 10


@pytest.mark.asyncio
async def test_init_db_is_a_no_op_by_default() -> None:
    """Test that startup leaves schema management to migrations."""
    with patch.object(database, "DB_CREATE_SCHEMA", False):
        with patch.object(database, "engine") as mock_engine:
            await database.init_db()
    mock_engine.begin.assert_not_called()


def test_message_column_matches_length_limit() -> None:
    """Test that the content column is as wide as the send-path limit."""
    assert MessageModel.__table__.c.content.type.length == config.MESSAGE_MAX_LENGTH
