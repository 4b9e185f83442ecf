from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import relationship

from direct_messaging.config import MESSAGE_MAX_LENGTH
from direct_messaging.database import Base


class MessageModel(Base):
    """SQLAlchemy model for messages table.

    The autoincrement id is the ordering key; created_at values may collide.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_conversation_id_id", "conversation_id", "id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id"), nullable=False
    )
    sender_id = Column(Integer, nullable=False)
    content = Column(String(MESSAGE_MAX_LENGTH), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    # Relationships
    conversation = relationship("ConversationModel", back_populates="messages")
    attachment = relationship(
        "AttachmentModel",
        back_populates="message",
        uselist=False,
        cascade="all, delete-orphan",
    )
