"""
Feedback, notification and SMS log models.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Boolean, JSON, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base
from domain.enums import FeedbackType, FeedbackStatus, FeedbackPriority


class UserFeedback(Base):
    __tablename__ = "user_feedback"

    feedback_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    user_email = Column(Text)
    feedback_type = Column(SQLEnum(FeedbackType), nullable=False, default=FeedbackType.OTHER)
    subject = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    page_url = Column(Text)
    browser_info = Column(JSON)
    screenshot_url = Column(Text)
    status = Column(SQLEnum(FeedbackStatus), nullable=False, default=FeedbackStatus.NEW)
    priority = Column(
        SQLEnum(FeedbackPriority), nullable=False, default=FeedbackPriority.MEDIUM
    )
    admin_notes = Column(Text)
    resolved_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    resolved_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Notification(Base):
    """In-app notification row"""

    __tablename__ = "notification"

    notification_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    data = Column(JSON)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("AppUser", back_populates="notifications")


class SmsLog(Base):
    __tablename__ = "sms_log"

    sms_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    phone_number = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
    twilio_sid = Column(Text)
    error = Column(Text)
    sent_at = Column(DateTime, default=utcnow)
