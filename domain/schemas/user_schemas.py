from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


class SignupRequest(BaseModel):
    """Schema for signing up with a school approval code"""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    approval_number: str = Field(
        ..., description="Signup code issued by a community, e.g. 'ABC100001'"
    )
    sms_opt_in: bool = False

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("approval_number")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class UserSettingsUpdate(BaseModel):
    """Partial update of the caller's own settings"""

    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    sms_opt_in: Optional[bool] = None
    sms_notifications_enabled: Optional[bool] = None
    default_reminder_hours: Optional[int] = Field(None, ge=1, le=168)


class SetAdminRequest(BaseModel):
    is_admin: bool


class UserResponse(BaseModel):
    user_id: UUID
    email: str
    full_name: Optional[str]
    phone: Optional[str]
    is_admin: bool
    community_id: Optional[UUID]
    approval_number: Optional[str]
    sms_opt_in: bool
    sms_notifications_enabled: bool
    default_reminder_hours: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
