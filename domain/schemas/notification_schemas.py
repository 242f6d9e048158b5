from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime
from uuid import UUID

from domain.enums import SmsType


class NotificationResponse(BaseModel):
    notification_id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    read: bool
    data: Optional[Dict[str, Any]]
    created_at: datetime

    model_config = {"from_attributes": True}


class SmsRequest(BaseModel):
    """Admin-triggered SMS"""

    to: str = Field(..., min_length=2, max_length=32)
    message: str = Field(..., min_length=1, max_length=1600)
    type: SmsType = SmsType.NOTIFICATION


class SmsResponse(BaseModel):
    success: bool
    message_sid: Optional[str]
    status: Optional[str]
