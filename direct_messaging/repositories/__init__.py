# Repository classes for database operations
from .attachment_repository import AttachmentRepository
from .base_repository import BaseRepository
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .participant_repository import ParticipantRepository

__all__ = [
    "AttachmentRepository",
    "BaseRepository",
    "ConversationRepository",
    "MessageRepository",
    "ParticipantRepository",
]
