"""
Pickup verification disputes and audit log.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, JSON, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base
from domain.enums import DisputeType, DisputeStatus


class VerificationDispute(Base):
    __tablename__ = "verification_dispute"

    dispute_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id = Column(
        Uuid,
        ForeignKey("food_listing.listing_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reported_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    dispute_type = Column(SQLEnum(DisputeType), nullable=False)
    description = Column(Text, nullable=False)
    evidence_photos = Column(JSON, default=list)
    status = Column(SQLEnum(DisputeStatus), nullable=False, default=DisputeStatus.OPEN)
    resolution_notes = Column(Text)
    resolved_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    resolved_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)

    listing = relationship("FoodListing")


class VerificationLog(Base):
    __tablename__ = "verification_log"

    log_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id = Column(
        Uuid,
        ForeignKey("food_listing.listing_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    action = Column(Text, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
