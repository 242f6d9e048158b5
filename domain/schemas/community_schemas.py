from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from uuid import UUID


class CommunityCreate(BaseModel):
    """Schema for creating a community / school closet"""

    name: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = None
    contact: Optional[str] = None
    phone: Optional[str] = None
    hours: Optional[str] = None
    image_url: Optional[str] = None
    school_code: Optional[str] = Field(None, min_length=3, max_length=3)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    is_active: bool = True

    @field_validator("school_code")
    @classmethod
    def upper_school_code(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.isalpha():
            raise ValueError("school_code must be 3 letters")
        return v.upper()


class CommunityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    contact: Optional[str] = None
    phone: Optional[str] = None
    hours: Optional[str] = None
    image_url: Optional[str] = None
    school_code: Optional[str] = Field(None, min_length=3, max_length=3)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    is_active: Optional[bool] = None

    @field_validator("school_code")
    @classmethod
    def upper_school_code(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.isalpha():
            raise ValueError("school_code must be 3 letters")
        return v.upper()


class CommunityResponse(BaseModel):
    community_id: UUID
    name: str
    location: Optional[str]
    contact: Optional[str]
    phone: Optional[str]
    hours: Optional[str]
    image_url: Optional[str]
    school_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GenerateCodesRequest(BaseModel):
    community_id: UUID
    school_code: str = Field(..., description="3-letter prefix, e.g. 'LIN'")
    quantity: int = Field(..., description="Number of codes to generate (1..1000)")


class ApprovalCodeResponse(BaseModel):
    code: str
    school_code: str
    community_id: UUID
    is_claimed: bool
    claimed_by: Optional[UUID]
    claimed_at: Optional[datetime]
    created_by: Optional[UUID]
    created_at: datetime

    model_config = {"from_attributes": True}


class GenerateCodesResponse(BaseModel):
    generated: int
    first_code: str
    last_code: str
    codes: List[str]


class SchoolCodeStats(BaseModel):
    total: int = 0
    claimed: int = 0
    unclaimed: int = 0


class ApprovalCodeStats(BaseModel):
    total: int
    claimed: int
    unclaimed: int
    by_school: Dict[str, SchoolCodeStats]
