from typing import Any, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import undefer

from direct_messaging.models.api.messages import AttachmentPayload, AttachmentResponse
from direct_messaging.models.db.attachment_model import AttachmentModel
from direct_messaging.models.db.message_model import MessageModel
from direct_messaging.repositories.base_repository import BaseRepository


class AttachmentRepository(BaseRepository[AttachmentModel, AttachmentResponse]):
    """Repository for message attachments (one per message at most)."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, AttachmentModel)

    async def add_for_message(
        self, message_id: int, original_name: str, media_type: str, data: bytes
    ) -> AttachmentResponse:
        """Store an attachment for a just-inserted message. Does not commit."""
        return await self.insert(
            AttachmentModel(
                message_id=message_id,
                original_name=original_name,
                media_type=media_type,
                size_bytes=len(data),
                data=data,
            ),
            commit=False,
        )

    async def get_with_conversation(
        self, attachment_id: int
    ) -> Optional[Tuple[AttachmentPayload, int]]:
        """Load an attachment's payload together with its conversation id."""
        query = (
            select(self.model_class, MessageModel.conversation_id)
            .join(MessageModel, MessageModel.id == self.model_class.message_id)
            .where(self.model_class.id == attachment_id)
            .options(undefer(self.model_class.data))
        )  # type: ignore
        result = await self.db.execute(query)
        row = result.one_or_none()
        if row is None:
            return None

        db_model, conversation_id = row
        payload = AttachmentPayload(
            id=db_model.id,
            name=db_model.original_name,
            media_type=db_model.media_type,
            data=db_model.data,
        )
        return payload, conversation_id

    def _to_pydantic(self, db_model: Any) -> AttachmentResponse:
        """Convert SQLAlchemy AttachmentModel to Pydantic AttachmentResponse."""
        return AttachmentResponse(
            id=db_model.id,
            name=db_model.original_name,
            media_type=db_model.media_type,
            size_bytes=db_model.size_bytes,
        )
