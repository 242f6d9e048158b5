from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime, date, time
from uuid import UUID
from decimal import Decimal

from domain.enums import ClaimStatus, ReceiptStatus


class ClaimCreate(BaseModel):
    """Schema for claiming a food listing"""

    food_id: UUID
    pickup_date: Optional[date] = None
    pickup_time: Optional[time] = None
    pickup_place: Optional[str] = None
    reminder_hours_before: Optional[int] = Field(
        None, ge=1, le=168, description="Defaults to the user's own setting"
    )
    members_count: Optional[int] = Field(None, ge=1, le=50)
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)


class ClaimResponse(BaseModel):
    claim_id: UUID
    food_id: UUID
    claimer_id: UUID
    receipt_id: Optional[UUID]
    status: ClaimStatus
    pickup_date: Optional[date]
    pickup_time: Optional[time]
    pickup_place: Optional[str]
    reminder_hours_before: int
    reminder_sent: bool
    members_count: Optional[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class ReceiptItem(BaseModel):
    """One claimed listing on a receipt"""

    claim_id: UUID
    food_id: UUID
    title: str
    quantity: Decimal
    unit: Optional[str]
    status: ClaimStatus


class ReceiptResponse(BaseModel):
    receipt_id: UUID
    user_id: UUID
    status: ReceiptStatus
    pickup_location: Optional[str]
    pickup_address: Optional[str]
    pickup_window: Optional[str]
    claimed_at: datetime
    pickup_by: datetime
    picked_up_at: Optional[datetime]
    expired_at: Optional[datetime]
    reclaimed_from_id: Optional[UUID]
    items: List[ReceiptItem] = []


class ClaimResultResponse(BaseModel):
    """Claim plus the receipt it was aggregated into"""

    claim: ClaimResponse
    receipt: ReceiptResponse


class ReclaimResponse(BaseModel):
    success: bool = True
    receipt: ReceiptResponse
    reclaimed_count: int
    unavailable_count: int


class ExpireReceiptsResponse(BaseModel):
    success: bool
    expired_count: int
    message: str
    timestamp: datetime


class ReminderResults(BaseModel):
    reminders_created: int = 0
    errors: List[str] = []


class ProcessRemindersResponse(BaseModel):
    success: bool
    processed: int
    results: ReminderResults
    timestamp: datetime


class PickupReminder(BaseModel):
    """A claim whose reminder window has opened"""

    claim_id: UUID
    claimer_id: UUID
    food_id: UUID
    food_title: Optional[str] = None
    pickup_date: date
    pickup_time: Optional[time]
    pickup_place: Optional[str]
    reminder_hours_before: int

    def as_notification_data(self) -> dict[str, Any]:
        return {
            "claim_id": str(self.claim_id),
            "food_id": str(self.food_id),
            "pickup_date": self.pickup_date.isoformat(),
            "pickup_time": self.pickup_time.isoformat() if self.pickup_time else None,
            "pickup_place": self.pickup_place,
        }
