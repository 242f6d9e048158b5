"""
Community (school closet) and approval code models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Boolean,
    Float,
    Uuid,
)
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base


class Community(Base):
    """A community food closet, usually hosted by a school"""

    __tablename__ = "community"

    community_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, unique=True, nullable=False)
    location = Column(Text)
    contact = Column(Text)
    phone = Column(Text)
    hours = Column(Text)
    image_url = Column(Text)
    school_code = Column(Text)  # 3-letter approval code prefix
    latitude = Column(Float)
    longitude = Column(Float)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    members = relationship("AppUser", back_populates="community")
    approval_codes = relationship(
        "ApprovalCode", back_populates="community", cascade="all, delete-orphan"
    )


class ApprovalCode(Base):
    """One-time signup code tying a new user to a community"""

    __tablename__ = "approval_code"

    code = Column(Text, primary_key=True)
    school_code = Column(Text, nullable=False, index=True)
    community_id = Column(
        Uuid, ForeignKey("community.community_id", ondelete="CASCADE"), nullable=False
    )
    is_claimed = Column(Boolean, nullable=False, default=False)
    claimed_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    claimed_at = Column(DateTime)
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=utcnow)

    community = relationship("Community", back_populates="approval_codes")
