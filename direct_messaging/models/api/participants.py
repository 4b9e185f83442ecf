from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ParticipantResponse(BaseModel):
    """Response model for a conversation membership row."""

    id: int
    conversation_id: int
    participant_id: int
    hidden_since: Optional[datetime] = None
    last_read_message_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_hidden(self) -> bool:
        return self.hidden_since is not None


class ParticipantProfile(BaseModel):
    """Directory data about a participant, owned by the platform profile service."""

    id: int
    display_name: Optional[str] = None
    role: Optional[str] = None
    avatar_url: Optional[str] = None
