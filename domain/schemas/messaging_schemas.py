from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from domain.enums import ConversationStatus


class MessageCreate(BaseModel):
    """Schema for sending a message in a conversation"""

    content: str = Field(..., max_length=2000)
    client_ref: Optional[str] = Field(
        None,
        max_length=100,
        description="Client-side temporary id echoed back on the realtime channel",
    )

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message content cannot be empty")
        return v


class MessageResponse(BaseModel):
    message_id: UUID
    conversation_id: UUID
    sender_id: Optional[UUID]
    content: str
    is_admin: bool
    read: bool
    created_at: datetime
    client_ref: Optional[str] = None

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    conversation_id: UUID
    user_id: UUID
    status: ConversationStatus
    last_message_at: Optional[datetime]
    created_at: datetime
    unread_count: int = 0

    model_config = {"from_attributes": True}
