from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from uuid import UUID
from decimal import Decimal

from domain.enums import ListingStatus, ModerationDecision, UrgencyLevel, VerificationStatus


class FoodListingCreate(BaseModel):
    """Schema for posting a new food listing"""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    quantity: Decimal = Field(..., gt=0, description="Amount offered")
    unit: Optional[str] = Field(None, description="Unit (e.g. 'lbs', 'items', 'boxes')")
    category: str = Field(..., min_length=1, description="Category (produce, dairy, ...)")
    expiry_date: Optional[date] = Field(
        None, description="Required for every category except produce"
    )
    pickup_by: Optional[datetime] = None
    community_id: Optional[UUID] = None
    donor_name: Optional[str] = None
    donor_email: Optional[str] = None
    donor_phone: Optional[str] = None
    full_address: Optional[str] = None
    image_url: Optional[str] = None


class FoodListingUpdate(BaseModel):
    """Partial listing update; only fields that are set get applied"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit: Optional[str] = None
    category: Optional[str] = None
    expiry_date: Optional[date] = None
    pickup_by: Optional[datetime] = None
    full_address: Optional[str] = None
    image_url: Optional[str] = None


class ModerationRequest(BaseModel):
    decision: ModerationDecision


class UrgencyInfo(BaseModel):
    """Countdown information derived from a listing's deadline"""

    level: UrgencyLevel
    deadline: Optional[datetime]
    seconds_remaining: int
    countdown: str
    is_expired: bool
    is_urgent: bool


class FoodListingResponse(BaseModel):
    listing_id: UUID
    user_id: UUID
    community_id: Optional[UUID]
    title: str
    description: Optional[str]
    quantity: Decimal
    unit: Optional[str]
    category: str
    expiry_date: Optional[date]
    pickup_by: Optional[datetime]
    status: ListingStatus
    claimed_by: Optional[UUID]
    donor_name: Optional[str]
    full_address: Optional[str]
    image_url: Optional[str]
    verification_status: VerificationStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    urgency: Optional[UrgencyInfo] = None

    model_config = {"from_attributes": True}


class FoodListingListResponse(BaseModel):
    listings: List[FoodListingResponse]
    total: int
