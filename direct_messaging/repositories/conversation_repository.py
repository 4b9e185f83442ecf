import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from direct_messaging.errors import StorageConflictError
from direct_messaging.models.api.conversations import ConversationResponse
from direct_messaging.models.db.conversation_model import ConversationModel
from direct_messaging.models.db.participant_model import ParticipantModel
from direct_messaging.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


def canonical_pair(participant_a: int, participant_b: int) -> Tuple[int, int]:
    """Order a participant pair so (a, b) and (b, a) map to the same key."""
    if participant_a <= participant_b:
        return participant_a, participant_b
    return participant_b, participant_a


class ConversationRepository(BaseRepository[ConversationModel, ConversationResponse]):
    """Repository for conversation operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ConversationModel)

    async def get_by_participants(
        self, participant_a: int, participant_b: int
    ) -> Optional[ConversationResponse]:
        """Find the direct conversation between two participants, either order."""
        low, high = canonical_pair(participant_a, participant_b)
        query = select(self.model_class).where(
            self.model_class.participant_low == low,
            self.model_class.participant_high == high,
        )  # type: ignore
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def create_direct(
        self, participant_a: int, participant_b: int, now: datetime
    ) -> ConversationResponse:
        """Create a conversation and a visible membership for both sides.

        Everything commits together. If another request created the same pair
        first, the unique constraint fires, the transaction is rolled back and
        StorageConflictError is raised so the caller can re-fetch the winner.
        """
        low, high = canonical_pair(participant_a, participant_b)
        db_model = ConversationModel(
            participant_low=low,
            participant_high=high,
            created_at=now,
            last_activity_at=now,
        )
        try:
            self.db.add(db_model)
            await self.db.flush()
            self.db.add_all(
                [
                    ParticipantModel(
                        conversation_id=db_model.id,
                        participant_id=participant_id,
                        created_at=now,
                    )
                    for participant_id in (low, high)
                ]
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("Conversation for pair (%s, %s) already exists", low, high)
            raise StorageConflictError(
                f"Conversation for pair ({low}, {high}) already exists"
            ) from e

        logger.info(
            "Created conversation %s for pair (%s, %s)", db_model.id, low, high
        )
        return self._to_pydantic(db_model)

    async def touch_last_activity(self, conversation_id: int, when: datetime) -> None:
        """Advance last_activity_at. Does not commit; part of the send transaction."""
        await self.db.execute(
            update(self.model_class)
            .where(self.model_class.id == conversation_id)
            .values(last_activity_at=when)
        )

    async def list_visible_for_participant(
        self, participant_id: int
    ) -> List[ConversationResponse]:
        """Conversations the participant has not hidden, most recently active first."""
        query = (
            select(self.model_class)
            .join(
                ParticipantModel,
                ParticipantModel.conversation_id == self.model_class.id,
            )
            .where(
                ParticipantModel.participant_id == participant_id,
                ParticipantModel.hidden_since.is_(None),
            )
            .order_by(
                self.model_class.last_activity_at.desc(), self.model_class.id.desc()
            )
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    def _to_pydantic(self, db_model: Any) -> ConversationResponse:
        """Convert SQLAlchemy ConversationModel to Pydantic ConversationResponse."""
        return ConversationResponse(
            id=db_model.id,
            participant_low=db_model.participant_low,
            participant_high=db_model.participant_high,
            created_at=db_model.created_at,
            last_activity_at=db_model.last_activity_at,
        )
