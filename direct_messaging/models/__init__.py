# Export all models
from .api import (
    AttachmentPayload,
    AttachmentResponse,
    AttachmentUpload,
    ConversationListItem,
    ConversationResponse,
    DirectConversationResponse,
    MessageResponse,
    ParticipantProfile,
    ParticipantResponse,
)
from .db import (
    AttachmentModel,
    ConversationModel,
    MessageModel,
    ParticipantModel,
)

__all__ = [
    # API models
    "AttachmentPayload",
    "AttachmentResponse",
    "AttachmentUpload",
    "ConversationListItem",
    "ConversationResponse",
    "DirectConversationResponse",
    "MessageResponse",
    "ParticipantProfile",
    "ParticipantResponse",
    # DB models
    "AttachmentModel",
    "ConversationModel",
    "MessageModel",
    "ParticipantModel",
]
