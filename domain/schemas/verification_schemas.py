from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID

from domain.enums import DisputeStatus, DisputeType, VerificationStatus


class VerificationRequest(BaseModel):
    """Photos (already uploaded) and notes for a before/after check"""

    photos: List[str] = Field(default_factory=list, description="Public photo URLs")
    notes: Optional[str] = Field(None, max_length=2000)


class DisputeCreate(BaseModel):
    dispute_type: DisputeType
    description: str = Field(..., min_length=1, max_length=2000)
    evidence_photos: List[str] = Field(default_factory=list)


class DisputeResolve(BaseModel):
    status: DisputeStatus
    resolution_notes: Optional[str] = Field(None, max_length=2000)


class PhotoUploadResponse(BaseModel):
    path: str
    url: str


class VerificationStatusResponse(BaseModel):
    listing_id: UUID
    verification_status: VerificationStatus
    verification_required: bool
    verified_before_pickup: bool
    verified_after_pickup: bool
    verification_before_photos: List[str] = []
    verification_after_photos: List[str] = []
    verification_before_notes: Optional[str]
    verification_after_notes: Optional[str]
    verified_before_by: Optional[UUID]
    verified_before_at: Optional[datetime]
    verified_after_by: Optional[UUID]
    verified_after_at: Optional[datetime]

    model_config = {"from_attributes": True}


class DisputeResponse(BaseModel):
    dispute_id: UUID
    listing_id: UUID
    reported_by: Optional[UUID]
    dispute_type: DisputeType
    description: str
    evidence_photos: List[str] = []
    status: DisputeStatus
    resolution_notes: Optional[str]
    resolved_by: Optional[UUID]
    resolved_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class VerificationLogResponse(BaseModel):
    log_id: UUID
    listing_id: UUID
    actor_id: Optional[UUID]
    action: str
    notes: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class VerificationStats(BaseModel):
    total: int
    by_status: Dict[str, int]
