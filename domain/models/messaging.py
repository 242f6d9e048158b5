"""
Support conversation and message models.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Boolean, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base
from domain.enums import ConversationStatus


class Conversation(Base):
    """One support thread between a user and the admins"""

    __tablename__ = "conversation"

    conversation_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(
        SQLEnum(ConversationStatus), nullable=False, default=ConversationStatus.OPEN
    )
    last_message_at = Column(DateTime, default=utcnow)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("AppUser")
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )


class Message(Base):
    __tablename__ = "message"

    message_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        Uuid,
        ForeignKey("conversation.conversation_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    content = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")
