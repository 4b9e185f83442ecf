import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.errors import InvalidRequestError, StorageConflictError
from direct_messaging.models.api.conversations import ConversationResponse
from direct_messaging.repositories.conversation_repository import (
    ConversationRepository,
)
from direct_messaging.repositories.participant_repository import ParticipantRepository

logger = logging.getLogger(__name__)


class GetOrCreateDirectService:
    """Resolves the single direct conversation of an unordered participant pair."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.participant_repo = ParticipantRepository(db)

    async def get_or_create_direct(
        self, me: int, other: int
    ) -> ConversationResponse:
        """
        Find or create the conversation between ``me`` and ``other``:

        1. Reject a conversation with oneself
        2. Look up the pair in canonical order
        3. Create it with both memberships if missing; a lost creation race
           is resolved by re-fetching the row the winner inserted
        4. Make sure the caller's own membership is visible again
        """
        if me == other:
            raise InvalidRequestError("cannot start a conversation with yourself")

        conversation = await self.conversation_repo.get_by_participants(me, other)
        if conversation is not None:
            await self._restore_membership(conversation.id, me)
            return conversation

        try:
            return await self.conversation_repo.create_direct(
                me, other, datetime.now(timezone.utc)
            )
        except StorageConflictError:
            conversation = await self.conversation_repo.get_by_participants(me, other)
            if conversation is None:
                raise
            logger.info(
                "Creation race for pair (%s, %s) resolved to conversation %s",
                me,
                other,
                conversation.id,
            )

        await self._restore_membership(conversation.id, me)
        return conversation

    async def _restore_membership(self, conversation_id: int, me: int) -> None:
        """Unhide the caller's side only; the counterpart's state is untouched."""
        membership = await self.participant_repo.get_membership(conversation_id, me)
        if membership is None:
            await self.participant_repo.add_participant(
                conversation_id, me, datetime.now(timezone.utc)
            )
        elif membership.is_hidden:
            await self.participant_repo.unhide(conversation_id, me)
