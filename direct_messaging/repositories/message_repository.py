from datetime import datetime
from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from direct_messaging.models.api.messages import AttachmentResponse, MessageResponse
from direct_messaging.models.db.message_model import MessageModel
from direct_messaging.repositories.base_repository import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for the per-conversation message log."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel)

    async def append(
        self, conversation_id: int, sender_id: int, content: str, created_at: datetime
    ) -> MessageResponse:
        """Insert a message and assign its id. Does not commit."""
        return await self.insert(
            MessageModel(
                conversation_id=conversation_id,
                sender_id=sender_id,
                content=content,
                created_at=created_at,
                attachment=None,
            ),
            commit=False,
        )

    async def latest(self, conversation_id: int, limit: int) -> List[MessageResponse]:
        """Most recent messages of a conversation, newest (highest id) first."""
        query = (
            select(self.model_class)
            .where(self.model_class.conversation_id == conversation_id)
            .options(selectinload(self.model_class.attachment))
            .order_by(self.model_class.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )  # type: ignore
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def latest_preview(self, conversation_id: int) -> str:
        """Content of the newest message, or an empty string."""
        query = (
            select(self.model_class.content)
            .where(self.model_class.conversation_id == conversation_id)
            .order_by(self.model_class.id.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        content = result.scalar_one_or_none()
        return content or ""

    def _to_pydantic(self, db_model: Any) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        attachments: List[AttachmentResponse] = []
        attachment = db_model.attachment
        if attachment is not None:
            attachments.append(
                AttachmentResponse(
                    id=attachment.id,
                    name=attachment.original_name,
                    media_type=attachment.media_type,
                    size_bytes=attachment.size_bytes,
                )
            )

        return MessageResponse(
            id=db_model.id,
            conversation_id=db_model.conversation_id,
            sender_id=db_model.sender_id,
            content=db_model.content,
            created_at=db_model.created_at,
            attachments=attachments,
        )
