from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.clients.base_directory_client import BaseDirectoryClient
from direct_messaging.clients.static_directory_client import StaticDirectoryClient
from direct_messaging.models.api.conversations import ConversationListItem
from direct_messaging.repositories.conversation_repository import (
    ConversationRepository,
)
from direct_messaging.repositories.message_repository import MessageRepository


class ListConversationsService:
    """Service for listing a participant's visible conversations."""

    def __init__(
        self, db: AsyncSession, directory_client: Optional[BaseDirectoryClient] = None
    ):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)
        self.directory_client = directory_client or StaticDirectoryClient()

    async def list_conversations(
        self, participant_id: int
    ) -> List[ConversationListItem]:
        """
        List the participant's inbox:

        1. Load non-hidden conversations, most recently active first
        2. Resolve counterpart profiles from the directory
        3. Attach the newest message as preview
        """
        conversations = await self.conversation_repo.list_visible_for_participant(
            participant_id
        )

        counterpart_ids = [c.counterpart_of(participant_id) for c in conversations]
        profiles = await self.directory_client.get_profiles(counterpart_ids)

        items: List[ConversationListItem] = []
        for conversation, counterpart_id in zip(conversations, counterpart_ids):
            profile = profiles.get(counterpart_id)
            items.append(
                ConversationListItem(
                    conversation_id=conversation.id,
                    counterpart_id=counterpart_id,
                    counterpart_display_name=profile.display_name if profile else None,
                    counterpart_role=profile.role if profile else None,
                    counterpart_avatar_url=profile.avatar_url if profile else None,
                    last_message_preview=await self.message_repo.latest_preview(
                        conversation.id
                    ),
                )
            )
        return items
