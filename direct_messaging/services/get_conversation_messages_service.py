from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging import config
from direct_messaging.models.api.messages import MessageResponse
from direct_messaging.repositories.message_repository import MessageRepository
from direct_messaging.services.membership_service import MembershipService


def clamp_limit(limit: Optional[int]) -> int:
    """Bound a requested page size to [1, MESSAGES_MAX_LIMIT]."""
    if limit is None:
        limit = config.MESSAGES_DEFAULT_LIMIT
    return max(1, min(limit, config.MESSAGES_MAX_LIMIT))


class GetConversationMessagesService:
    """Service for retrieving messages from a specific conversation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.membership_service = MembershipService(db)

    async def get_conversation_messages(
        self, participant_id: int, conversation_id: int, limit: Optional[int] = None
    ) -> List[MessageResponse]:
        """
        Get the latest messages of a conversation, newest first.

        There is no cursor: clients that need to re-sync (for example after a
        dropped realtime connection) call this again.
        """
        await self.membership_service.ensure_member(participant_id, conversation_id)
        return await self.message_repo.latest(conversation_id, clamp_limit(limit))
