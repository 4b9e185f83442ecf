from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.errors import ForbiddenError
from direct_messaging.models.api.participants import ParticipantResponse
from direct_messaging.repositories.participant_repository import ParticipantRepository


class MembershipService:
    """Authorization gate for every conversation-scoped operation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.participant_repo = ParticipantRepository(db)

    async def ensure_member(
        self, participant_id: int, conversation_id: int
    ) -> ParticipantResponse:
        """
        Return the caller's membership or raise ForbiddenError.

        Hidden memberships still pass: hiding only removes the conversation
        from the caller's inbox. A missing conversation and a foreign one
        are reported the same way.
        """
        membership = await self.participant_repo.get_membership(
            conversation_id, participant_id
        )
        if membership is None:
            raise ForbiddenError()
        return membership
