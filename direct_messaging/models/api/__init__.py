# API models for request/response contracts
from .conversations import (
    ConversationListItem,
    ConversationResponse,
    DirectConversationResponse,
)
from .messages import (
    AttachmentPayload,
    AttachmentResponse,
    AttachmentUpload,
    MessageResponse,
)
from .participants import ParticipantProfile, ParticipantResponse

__all__ = [
    "AttachmentPayload",
    "AttachmentResponse",
    "AttachmentUpload",
    "ConversationListItem",
    "ConversationResponse",
    "DirectConversationResponse",
    "MessageResponse",
    "ParticipantProfile",
    "ParticipantResponse",
]
