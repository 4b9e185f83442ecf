# SQLAlchemy database models
from .attachment_model import AttachmentModel
from .conversation_model import ConversationModel
from .message_model import MessageModel
from .participant_model import ParticipantModel

__all__ = ["AttachmentModel", "ConversationModel", "MessageModel", "ParticipantModel"]
