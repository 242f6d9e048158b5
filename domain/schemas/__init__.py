"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    SignupRequest,
    UserSettingsUpdate,
    SetAdminRequest,
    UserResponse,
)
from domain.schemas.listing_schemas import (
    FoodListingCreate,
    FoodListingUpdate,
    FoodListingResponse,
    FoodListingListResponse,
    ModerationRequest,
    UrgencyInfo,
)
from domain.schemas.receipt_schemas import (
    ClaimCreate,
    ClaimResponse,
    ClaimResultResponse,
    ReceiptItem,
    ReceiptResponse,
    ReclaimResponse,
    ExpireReceiptsResponse,
    ProcessRemindersResponse,
    ReminderResults,
    PickupReminder,
)
from domain.schemas.community_schemas import (
    CommunityCreate,
    CommunityUpdate,
    CommunityResponse,
    GenerateCodesRequest,
    GenerateCodesResponse,
    ApprovalCodeResponse,
    ApprovalCodeStats,
    SchoolCodeStats,
)
from domain.schemas.messaging_schemas import (
    MessageCreate,
    MessageResponse,
    ConversationResponse,
)
from domain.schemas.verification_schemas import (
    VerificationRequest,
    DisputeCreate,
    DisputeResolve,
    DisputeResponse,
    PhotoUploadResponse,
    VerificationStatusResponse,
    VerificationLogResponse,
    VerificationStats,
)
from domain.schemas.feedback_schemas import (
    FeedbackCreate,
    FeedbackUpdate,
    FeedbackResponse,
    FeedbackStats,
)
from domain.schemas.notification_schemas import (
    NotificationResponse,
    SmsRequest,
    SmsResponse,
)

__all__ = [
    # User schemas
    "SignupRequest",
    "UserSettingsUpdate",
    "SetAdminRequest",
    "UserResponse",
    # Listing schemas
    "FoodListingCreate",
    "FoodListingUpdate",
    "FoodListingResponse",
    "FoodListingListResponse",
    "ModerationRequest",
    "UrgencyInfo",
    # Claim / receipt schemas
    "ClaimCreate",
    "ClaimResponse",
    "ClaimResultResponse",
    "ReceiptItem",
    "ReceiptResponse",
    "ReclaimResponse",
    "ExpireReceiptsResponse",
    "ProcessRemindersResponse",
    "ReminderResults",
    "PickupReminder",
    # Community schemas
    "CommunityCreate",
    "CommunityUpdate",
    "CommunityResponse",
    "GenerateCodesRequest",
    "GenerateCodesResponse",
    "ApprovalCodeResponse",
    "ApprovalCodeStats",
    "SchoolCodeStats",
    # Messaging schemas
    "MessageCreate",
    "MessageResponse",
    "ConversationResponse",
    # Verification schemas
    "VerificationRequest",
    "DisputeCreate",
    "DisputeResolve",
    "DisputeResponse",
    "PhotoUploadResponse",
    "VerificationStatusResponse",
    "VerificationLogResponse",
    "VerificationStats",
    # Feedback schemas
    "FeedbackCreate",
    "FeedbackUpdate",
    "FeedbackResponse",
    "FeedbackStats",
    # Notification schemas
    "NotificationResponse",
    "SmsRequest",
    "SmsResponse",
]
