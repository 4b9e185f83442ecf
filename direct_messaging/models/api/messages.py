from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AttachmentResponse(BaseModel):
    """Attachment metadata; the payload is only served by the download route."""

    id: int
    name: str
    media_type: str
    size_bytes: int

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Response model for message data."""

    id: int
    conversation_id: int
    sender_id: int
    content: str
    created_at: datetime
    attachments: List[AttachmentResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AttachmentUpload(BaseModel):
    """A file received alongside a message, already read into memory."""

    data: bytes
    declared_media_type: Optional[str] = None
    original_name: Optional[str] = None


class AttachmentPayload(BaseModel):
    """A stored attachment ready to be streamed back to a member."""

    id: int
    name: str
    media_type: str
    data: bytes
