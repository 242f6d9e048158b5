"""
Food listing, claim and receipt models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    Date,
    Time,
    ForeignKey,
    Numeric,
    Boolean,
    Integer,
    JSON,
    Uuid,
    Enum as SQLEnum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
import uuid

from app.clock import utcnow
from domain.models.database import Base
from domain.enums import ListingStatus, ClaimStatus, ReceiptStatus, VerificationStatus


class FoodListing(Base):
    """A food item posted for donation"""

    __tablename__ = "food_listing"

    listing_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    community_id = Column(
        Uuid, ForeignKey("community.community_id", ondelete="SET NULL")
    )
    title = Column(Text, nullable=False)
    description = Column(Text)
    quantity = Column(Numeric, nullable=False)
    unit = Column(Text)
    category = Column(Text, nullable=False)
    expiry_date = Column(Date)
    pickup_by = Column(DateTime)
    status = Column(
        SQLEnum(ListingStatus), nullable=False, default=ListingStatus.PENDING, index=True
    )
    claimed_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))

    donor_name = Column(Text)
    donor_email = Column(Text)
    donor_phone = Column(Text)
    full_address = Column(Text)
    image_url = Column(Text)

    # Before/after pickup verification
    verification_status = Column(
        SQLEnum(VerificationStatus), nullable=False, default=VerificationStatus.PENDING
    )
    verification_required = Column(Boolean, nullable=False, default=True)
    verified_before_pickup = Column(Boolean, nullable=False, default=False)
    verified_after_pickup = Column(Boolean, nullable=False, default=False)
    verification_before_photos = Column(JSON, default=list)
    verification_after_photos = Column(JSON, default=list)
    verification_before_notes = Column(Text)
    verification_after_notes = Column(Text)
    verified_before_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    verified_before_at = Column(DateTime)
    verified_after_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    verified_after_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("AppUser", back_populates="listings", foreign_keys=[user_id])
    community = relationship("Community")
    claims = relationship("FoodClaim", back_populates="listing", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_listing_quantity_positive"),
    )


class Receipt(Base):
    """Aggregation of one user's claims for a single pickup event"""

    __tablename__ = "receipt"

    receipt_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    status = Column(
        SQLEnum(ReceiptStatus), nullable=False, default=ReceiptStatus.PENDING, index=True
    )
    pickup_location = Column(Text)
    pickup_address = Column(Text)
    pickup_window = Column(Text)
    claimed_at = Column(DateTime, nullable=False, default=utcnow)
    pickup_by = Column(DateTime, nullable=False)
    picked_up_at = Column(DateTime)
    expired_at = Column(DateTime)
    reclaimed_from_id = Column(Uuid, ForeignKey("receipt.receipt_id", ondelete="SET NULL"))

    user = relationship("AppUser", back_populates="receipts")
    claims = relationship("FoodClaim", back_populates="receipt")


class FoodClaim(Base):
    """A user's claim on a specific listing"""

    __tablename__ = "food_claim"

    claim_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    food_id = Column(
        Uuid, ForeignKey("food_listing.listing_id", ondelete="CASCADE"), nullable=False
    )
    claimer_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    receipt_id = Column(Uuid, ForeignKey("receipt.receipt_id", ondelete="SET NULL"), index=True)
    status = Column(SQLEnum(ClaimStatus), nullable=False, default=ClaimStatus.APPROVED)

    pickup_date = Column(Date)
    pickup_time = Column(Time)
    pickup_place = Column(Text)
    reminder_hours_before = Column(Integer, nullable=False, default=24)
    reminder_sent = Column(Boolean, nullable=False, default=False)

    members_count = Column(Integer)
    dietary_restrictions = Column(Text)
    notes = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    listing = relationship("FoodListing", back_populates="claims")
    receipt = relationship("Receipt", back_populates="claims")
    claimer = relationship("AppUser")
