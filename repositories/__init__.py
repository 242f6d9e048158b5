"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.community_repository import CommunityRepository, ApprovalCodeRepository
from repositories.listing_repository import ListingRepository
from repositories.receipt_repository import ReceiptRepository, ClaimRepository
from repositories.messaging_repository import ConversationRepository, MessageRepository
from repositories.verification_repository import (
    DisputeRepository,
    VerificationLogRepository,
)
from repositories.feedback_repository import (
    FeedbackRepository,
    NotificationRepository,
    SmsLogRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CommunityRepository",
    "ApprovalCodeRepository",
    "ListingRepository",
    "ReceiptRepository",
    "ClaimRepository",
    "ConversationRepository",
    "MessageRepository",
    "DisputeRepository",
    "VerificationLogRepository",
    "FeedbackRepository",
    "NotificationRepository",
    "SmsLogRepository",
]
