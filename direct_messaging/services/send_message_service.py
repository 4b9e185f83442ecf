import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging import config
from direct_messaging.errors import InvalidRequestError
from direct_messaging.models.api.messages import AttachmentUpload, MessageResponse
from direct_messaging.realtime.notifier import RealtimeNotifier, notifier
from direct_messaging.repositories.attachment_repository import AttachmentRepository
from direct_messaging.repositories.conversation_repository import (
    ConversationRepository,
)
from direct_messaging.repositories.message_repository import MessageRepository
from direct_messaging.services.attachment_validator import (
    attachment_name,
    validate_attachment,
)
from direct_messaging.services.membership_service import MembershipService

logger = logging.getLogger(__name__)


class SendMessageService:
    """Service for appending a message (and optional PDF) to a conversation."""

    def __init__(
        self, db: AsyncSession, realtime_notifier: Optional[RealtimeNotifier] = None
    ):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.attachment_repo = AttachmentRepository(db)
        self.conversation_repo = ConversationRepository(db)
        self.membership_service = MembershipService(db)
        self.notifier = realtime_notifier or notifier

    async def send_message(
        self,
        sender_id: int,
        conversation_id: int,
        content: Optional[str] = None,
        upload: Optional[AttachmentUpload] = None,
    ) -> MessageResponse:
        """
        Main business logic for sending a message:
        1. Check the sender is a member (hidden memberships may still post)
        2. Validate text and attachment before touching storage
        3. Insert message, attachment and last-activity update in one commit
        4. Hand the created message to the realtime notifier
        5. Return the created message
        """
        # Step 1: Authorization
        await self.membership_service.ensure_member(sender_id, conversation_id)

        # Step 2: Validation
        text = (content or "").strip()
        if not text and upload is None:
            raise InvalidRequestError("empty message")
        if len(text) > config.MESSAGE_MAX_LENGTH:
            raise InvalidRequestError(
                f"message too long (max {config.MESSAGE_MAX_LENGTH} characters)"
            )
        if upload is not None:
            validate_attachment(upload)

        # Step 3: Persist atomically
        now = datetime.now(timezone.utc)
        try:
            message = await self.message_repo.append(
                conversation_id, sender_id, text, now
            )
            if upload is not None:
                attachment = await self.attachment_repo.add_for_message(
                    message.id,
                    attachment_name(upload.original_name),
                    config.PDF_MEDIA_TYPE,
                    upload.data,
                )
                message = message.model_copy(update={"attachments": [attachment]})
            await self.conversation_repo.touch_last_activity(conversation_id, now)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Participant %s sent message %s in conversation %s (%d attachment(s))",
            sender_id,
            message.id,
            conversation_id,
            len(message.attachments),
        )

        # Step 4: Fan out after commit; never affects the stored message
        self.notifier.publish(conversation_id, message)

        # Step 5: Return the created message
        return message
