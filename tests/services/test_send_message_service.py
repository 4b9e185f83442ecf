from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.errors import ForbiddenError, InvalidRequestError
from direct_messaging.models.api.messages import AttachmentUpload, MessageResponse
from direct_messaging.models.db.attachment_model import AttachmentModel
from direct_messaging.models.db.message_model import MessageModel
from direct_messaging.repositories.conversation_repository import (
    ConversationRepository,
)
from direct_messaging.repositories.message_repository import MessageRepository
from direct_messaging.repositories.participant_repository import ParticipantRepository
from direct_messaging.services.get_or_create_direct_service import (
    GetOrCreateDirectService,
)
from direct_messaging.services.send_message_service import SendMessageService

MIB = 1024 * 1024


class TestSendMessageService:
    """Unit tests for SendMessageService."""

    @pytest.fixture
    def mock_notifier(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def service(
        self, mock_db: AsyncMock, mock_notifier: MagicMock
    ) -> SendMessageService:
        """SendMessageService with mocked collaborators."""
        service = SendMessageService(mock_db, mock_notifier)
        service.membership_service = MagicMock()
        service.membership_service.ensure_member = AsyncMock()
        service.message_repo = MagicMock()
        service.message_repo.append = AsyncMock(
            return_value=MessageResponse(
                id=10,
                conversation_id=1,
                sender_id=1,
                content="hello",
                created_at=datetime.now(timezone.utc),
            )
        )
        service.attachment_repo = MagicMock()
        service.attachment_repo.add_for_message = AsyncMock()
        service.conversation_repo = MagicMock()
        service.conversation_repo.touch_last_activity = AsyncMock()
        return service

    @pytest.mark.asyncio
    async def test_non_member_is_rejected_first(
        self, service: SendMessageService
    ) -> None:
        """Test that membership is checked before anything is validated."""
        service.membership_service.ensure_member.side_effect = ForbiddenError()

        with pytest.raises(ForbiddenError):
            await service.send_message(9, 1, content="")

        service.message_repo.append.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   \n\t "])
    async def test_empty_message_is_rejected(
        self, service: SendMessageService, content
    ) -> None:
        """Test that whitespace-only text without a file is rejected."""
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.send_message(1, 1, content=content)

        assert exc_info.value.detail == "empty message"
        service.message_repo.append.assert_not_called()

    @pytest.mark.asyncio
    async def test_too_long_message_is_rejected(
        self, service: SendMessageService
    ) -> None:
        """Test the 4000 character limit after trimming."""
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.send_message(1, 1, content="x" * 4001)

        assert exc_info.value.detail == "message too long (max 4000 characters)"

    @pytest.mark.asyncio
    async def test_text_is_trimmed_and_published(
        self,
        service: SendMessageService,
        mock_db: AsyncMock,
        mock_notifier: MagicMock,
    ) -> None:
        """Test a text message: trimmed, committed once, then published."""
        message = await service.send_message(1, 1, content="  hello  ")

        assert service.message_repo.append.call_args[0][:3] == (1, 1, "hello")
        service.conversation_repo.touch_last_activity.assert_awaited_once()
        mock_db.commit.assert_awaited_once()
        mock_notifier.publish.assert_called_once_with(1, message)

    @pytest.mark.asyncio
    async def test_failure_rolls_back_and_skips_publish(
        self,
        service: SendMessageService,
        mock_db: AsyncMock,
        mock_notifier: MagicMock,
    ) -> None:
        """Test that a storage error undoes the whole send."""
        service.conversation_repo.touch_last_activity.side_effect = RuntimeError(
            "db down"
        )

        with pytest.raises(RuntimeError):
            await service.send_message(1, 1, content="hello")

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_called()
        mock_notifier.publish.assert_not_called()


class TestSendMessageServiceIntegration:
    """Integration tests for SendMessageService against SQLite."""

    @pytest.fixture
    async def conversation_id(self, run_in_session) -> int:
        async def create(session: AsyncSession) -> int:
            service = GetOrCreateDirectService(session)
            return (await service.get_or_create_direct(1, 2)).id

        return await run_in_session(create)

    async def _message_count(self, session: AsyncSession) -> int:
        return await session.scalar(select(func.count()).select_from(MessageModel))

    async def _attachment_count(self, session: AsyncSession) -> int:
        return await session.scalar(
            select(func.count()).select_from(AttachmentModel)
        )

    async def _last_activity(self, session: AsyncSession) -> datetime:
        conversation = await ConversationRepository(session).get_by_participants(1, 2)
        assert conversation is not None
        return conversation.last_activity_at

    @pytest.mark.asyncio
    async def test_send_text_advances_last_activity(
        self, run_in_session, conversation_id: int
    ) -> None:
        """Test that a stored message bumps the conversation's activity time."""
        before = await run_in_session(self._last_activity)

        async def send(session: AsyncSession) -> MessageResponse:
            return await SendMessageService(session, MagicMock()).send_message(
                1, conversation_id, content="hi"
            )

        message = await run_in_session(send)
        after = await run_in_session(self._last_activity)

        assert message.content == "hi"
        assert message.attachments == []
        assert after > before

    @pytest.mark.asyncio
    async def test_send_with_pdf(self, run_in_session, conversation_id: int) -> None:
        """Test that a PDF-only message stores exactly one attachment."""
        upload = AttachmentUpload(
            data=b"%PDF-1.7 contract",
            declared_media_type="application/octet-stream",
            original_name="contract.pdf",
        )

        async def send(session: AsyncSession) -> MessageResponse:
            return await SendMessageService(session, MagicMock()).send_message(
                2, conversation_id, upload=upload
            )

        message = await run_in_session(send)

        assert message.content == ""
        assert len(message.attachments) == 1
        attachment = message.attachments[0]
        assert attachment.name == "contract.pdf"
        assert attachment.media_type == "application/pdf"
        assert attachment.size_bytes == len(upload.data)

        async def reload(session: AsyncSession):
            return await MessageRepository(session).latest(conversation_id, 30)

        stored = await run_in_session(reload)
        assert stored[0].attachments == message.attachments

    @pytest.mark.asyncio
    async def test_oversized_attachment_stores_nothing(
        self, run_in_session, conversation_id: int
    ) -> None:
        """Test that an 11 MiB upload is rejected before any row is written."""
        upload = AttachmentUpload(
            data=b"0" * (11 * MIB),
            declared_media_type="application/pdf",
            original_name="big.pdf",
        )
        notifier = MagicMock()

        async def send(session: AsyncSession) -> MessageResponse:
            return await SendMessageService(session, notifier).send_message(
                1, conversation_id, content="see attached", upload=upload
            )

        with pytest.raises(InvalidRequestError) as exc_info:
            await run_in_session(send)

        assert exc_info.value.detail == "attachment too large (max 10 MiB)"
        assert await run_in_session(self._message_count) == 0
        assert await run_in_session(self._attachment_count) == 0
        notifier.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_attachment_failure_leaves_no_message(
        self, run_in_session, conversation_id: int
    ) -> None:
        """Test that message and attachment are stored together or not at all."""
        before = await run_in_session(self._last_activity)
        upload = AttachmentUpload(data=b"%PDF", original_name="a.pdf")

        async def send(session: AsyncSession) -> MessageResponse:
            service = SendMessageService(session, MagicMock())
            with patch.object(
                service.attachment_repo,
                "add_for_message",
                AsyncMock(side_effect=RuntimeError("disk full")),
            ):
                return await service.send_message(
                    1, conversation_id, content="x", upload=upload
                )

        with pytest.raises(RuntimeError):
            await run_in_session(send)

        assert await run_in_session(self._message_count) == 0
        assert await run_in_session(self._last_activity) == before

    @pytest.mark.asyncio
    async def test_hidden_member_can_still_post(
        self, run_in_session, conversation_id: int
    ) -> None:
        """Test that hiding only affects the inbox, not the right to post."""

        async def hide_then_send(session: AsyncSession) -> MessageResponse:
            await ParticipantRepository(session).hide(
                conversation_id, 1, datetime.now(timezone.utc)
            )
            return await SendMessageService(session, MagicMock()).send_message(
                1, conversation_id, content="still here"
            )

        message = await run_in_session(hide_then_send)
        assert message.content == "still here"

    @pytest.mark.asyncio
    async def test_non_member_cannot_post(
        self, run_in_session, conversation_id: int
    ) -> None:
        """Test that a third participant is refused."""

        async def send(session: AsyncSession) -> MessageResponse:
            return await SendMessageService(session, MagicMock()).send_message(
                3, conversation_id, content="intruder"
            )

        with pytest.raises(ForbiddenError):
            await run_in_session(send)
        assert await run_in_session(self._message_count) == 0
