from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.repositories.participant_repository import ParticipantRepository
from direct_messaging.services.membership_service import MembershipService


class HideConversationService:
    """Removes a conversation from one participant's inbox."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.participant_repo = ParticipantRepository(db)
        self.membership_service = MembershipService(db)

    async def hide_conversation(
        self, participant_id: int, conversation_id: int
    ) -> None:
        # Messages and the counterpart's membership are left as they are
        await self.membership_service.ensure_member(participant_id, conversation_id)
        await self.participant_repo.hide(
            conversation_id, participant_id, datetime.now(timezone.utc)
        )
