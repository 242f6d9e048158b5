"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Boolean,
    Integer,
    Uuid,
)
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text)
    phone = Column(Text)
    is_admin = Column(Boolean, nullable=False, default=False)
    community_id = Column(
        Uuid, ForeignKey("community.community_id", ondelete="SET NULL")
    )
    approval_number = Column(Text)
    sms_opt_in = Column(Boolean, nullable=False, default=False)
    sms_notifications_enabled = Column(Boolean, nullable=False, default=False)
    default_reminder_hours = Column(Integer, nullable=False, default=24)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    community = relationship("Community", back_populates="members")
    listings = relationship(
        "FoodListing",
        back_populates="owner",
        foreign_keys="FoodListing.user_id",
        cascade="all, delete-orphan",
    )
    receipts = relationship(
        "Receipt", back_populates="user", cascade="all, delete-orphan"
    )
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )
