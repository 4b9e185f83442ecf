from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from direct_messaging.database import Base


class ParticipantModel(Base):
    """SQLAlchemy model for conversation_participants table (memberships)."""

    __tablename__ = "conversation_participants"
    __table_args__ = (
        UniqueConstraint(
            "conversation_id", "participant_id", name="uq_participants_membership"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id"), nullable=False, index=True
    )
    participant_id = Column(Integer, nullable=False, index=True)
    # Per-side soft delete: NULL means the conversation is in this participant's inbox
    hidden_since = Column(DateTime(timezone=True), nullable=True)
    # Reserved for read receipts, never read or written yet
    last_read_message_id = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    # Relationships
    conversation = relationship("ConversationModel", back_populates="participants")
