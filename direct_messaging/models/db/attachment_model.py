from sqlalchemy import BigInteger, Column, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import deferred, relationship

from direct_messaging.database import Base


class AttachmentModel(Base):
    """SQLAlchemy model for message_attachments table.

    At most one row per message; the payload column is deferred so listing
    messages never loads file bytes.
    """

    __tablename__ = "message_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(
        Integer, ForeignKey("messages.id"), nullable=False, unique=True
    )
    original_name = Column(String(255), nullable=False)
    media_type = Column(String(100), nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    data = deferred(Column(LargeBinary, nullable=False))

    # Relationships
    message = relationship("MessageModel", back_populates="attachment")
