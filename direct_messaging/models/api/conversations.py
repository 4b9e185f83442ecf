from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ConversationResponse(BaseModel):
    """Internal view of a direct conversation."""

    id: int
    participant_low: int
    participant_high: int
    created_at: datetime
    last_activity_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def counterpart_of(self, participant_id: int) -> int:
        """Return the other side of the pair."""
        if participant_id == self.participant_low:
            return self.participant_high
        return self.participant_low


class DirectConversationResponse(BaseModel):
    """Response model for get-or-create of a direct conversation."""

    conversation_id: int


class ConversationListItem(BaseModel):
    """One row of a participant's inbox."""

    conversation_id: int
    counterpart_id: int
    counterpart_display_name: Optional[str] = None
    counterpart_role: Optional[str] = None
    counterpart_avatar_url: Optional[str] = None
    last_message_preview: str = ""
