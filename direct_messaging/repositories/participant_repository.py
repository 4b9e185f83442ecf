import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from direct_messaging.errors import StorageConflictError
from direct_messaging.models.api.participants import ParticipantResponse
from direct_messaging.models.db.participant_model import ParticipantModel
from direct_messaging.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ParticipantRepository(BaseRepository[ParticipantModel, ParticipantResponse]):
    """Repository for conversation membership rows."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ParticipantModel)

    async def get_membership(
        self, conversation_id: int, participant_id: int
    ) -> Optional[ParticipantResponse]:
        """Get one participant's membership row, hidden or not."""
        query = select(self.model_class).where(
            self.model_class.conversation_id == conversation_id,
            self.model_class.participant_id == participant_id,
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def add_participant(
        self, conversation_id: int, participant_id: int, now: datetime
    ) -> ParticipantResponse:
        """Add a visible membership, or return the existing one.

        A concurrent insert of the same membership trips the unique constraint;
        the transaction is rolled back and the winner's row is returned.
        """
        existing = await self.get_membership(conversation_id, participant_id)
        if existing:
            return existing

        try:
            return await self.insert(
                ParticipantModel(
                    conversation_id=conversation_id,
                    participant_id=participant_id,
                    created_at=now,
                )
            )
        except IntegrityError as e:
            await self.db.rollback()
            existing = await self.get_membership(conversation_id, participant_id)
            if existing is None:
                raise StorageConflictError(
                    f"Membership of {participant_id} in conversation "
                    f"{conversation_id} could not be stored"
                ) from e
            logger.info(
                "Membership of %s in conversation %s was added concurrently",
                participant_id,
                conversation_id,
            )
            return existing

    async def hide(
        self, conversation_id: int, participant_id: int, now: datetime
    ) -> bool:
        """Mark the membership hidden. Returns False if it was already hidden."""
        result = await self.db.execute(
            update(self.model_class)
            .where(
                self.model_class.conversation_id == conversation_id,
                self.model_class.participant_id == participant_id,
                self.model_class.hidden_since.is_(None),
            )
            .values(hidden_since=now)
        )
        await self.db.commit()
        changed = result.rowcount > 0
        if changed:
            logger.info(
                "Participant %s hid conversation %s", participant_id, conversation_id
            )
        return changed

    async def unhide(self, conversation_id: int, participant_id: int) -> bool:
        """Clear the hidden marker. Returns False if it was already visible."""
        result = await self.db.execute(
            update(self.model_class)
            .where(
                self.model_class.conversation_id == conversation_id,
                self.model_class.participant_id == participant_id,
                self.model_class.hidden_since.is_not(None),
            )
            .values(hidden_since=None)
        )
        await self.db.commit()
        changed = result.rowcount > 0
        if changed:
            logger.info(
                "Participant %s restored conversation %s",
                participant_id,
                conversation_id,
            )
        return changed

    def _to_pydantic(self, db_model: Any) -> ParticipantResponse:
        """Convert SQLAlchemy ParticipantModel to Pydantic ParticipantResponse."""
        return ParticipantResponse(
            id=db_model.id,
            conversation_id=db_model.conversation_id,
            participant_id=db_model.participant_id,
            hidden_since=db_model.hidden_since,
            last_read_message_id=db_model.last_read_message_id,
            created_at=db_model.created_at,
        )
