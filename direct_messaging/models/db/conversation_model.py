from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from direct_messaging.database import Base


class ConversationModel(Base):
    """SQLAlchemy model for conversations table.

    A conversation always joins exactly two participants. The pair is stored
    in canonical order (low id first) so the unique constraint covers both
    directions of a get-or-create request.
    """

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint(
            "participant_low", "participant_high", name="uq_conversations_pair"
        ),
        CheckConstraint(
            "participant_low < participant_high", name="ck_conversations_pair_order"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    participant_low = Column(Integer, nullable=False)
    participant_high = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    last_activity_at = Column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )

    # Relationships
    messages = relationship(
        "MessageModel", back_populates="conversation", cascade="all, delete-orphan"
    )
    participants = relationship(
        "ParticipantModel", back_populates="conversation", cascade="all, delete-orphan"
    )
