from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime
from uuid import UUID

from domain.enums import FeedbackPriority, FeedbackStatus, FeedbackType


class FeedbackCreate(BaseModel):
    """Feedback from the in-app widget; anonymous submissions allowed"""

    feedback_type: FeedbackType = FeedbackType.OTHER
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    user_email: Optional[str] = None
    page_url: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None
    screenshot_url: Optional[str] = None
    priority: FeedbackPriority = FeedbackPriority.MEDIUM


class FeedbackUpdate(BaseModel):
    status: Optional[FeedbackStatus] = None
    priority: Optional[FeedbackPriority] = None
    admin_notes: Optional[str] = Field(None, max_length=5000)


class FeedbackResponse(BaseModel):
    feedback_id: UUID
    user_id: Optional[UUID]
    user_email: Optional[str]
    feedback_type: FeedbackType
    subject: str
    message: str
    page_url: Optional[str]
    browser_info: Optional[Dict[str, Any]]
    screenshot_url: Optional[str]
    status: FeedbackStatus
    priority: FeedbackPriority
    admin_notes: Optional[str]
    resolved_by: Optional[UUID]
    resolved_at: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeedbackStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_type: Dict[str, int]
    by_priority: Dict[str, int]
