"""
Domain enums for DoGoods application.
Contains all enumeration types used across the domain models.
"""

import enum


class ListingStatus(str, enum.Enum):
    """Food listing lifecycle"""

    PENDING = "pending"
    AVAILABLE = "available"
    APPROVED = "approved"
    CLAIMED = "claimed"
    COMPLETED = "completed"
    DECLINED = "declined"


# Listings in these states can be claimed (or reclaimed)
CLAIMABLE_LISTING_STATUSES = (ListingStatus.AVAILABLE, ListingStatus.APPROVED)


class ClaimStatus(str, enum.Enum):
    """Food claim lifecycle, follows the owning receipt"""

    APPROVED = "approved"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ReceiptStatus(str, enum.Enum):
    """Receipt lifecycle"""

    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ModerationDecision(str, enum.Enum):
    APPROVE = "approve"
    DECLINE = "decline"


class VerificationType(str, enum.Enum):
    BEFORE = "before"
    AFTER = "after"
    DISPUTE = "dispute"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED_BEFORE = "verified_before"
    VERIFIED_AFTER = "verified_after"
    COMPLETED = "completed"
    DISPUTED = "disputed"
    SKIPPED = "skipped"


class DisputeType(str, enum.Enum):
    QUALITY_MISMATCH = "quality_mismatch"
    QUANTITY_MISMATCH = "quantity_mismatch"
    NOT_AS_DESCRIBED = "not_as_described"
    SAFETY_CONCERN = "safety_concern"
    OTHER = "other"


class DisputeStatus(str, enum.Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class ConversationStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class FeedbackType(str, enum.Enum):
    BUG = "bug"
    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    OTHER = "other"


class FeedbackStatus(str, enum.Enum):
    NEW = "new"
    REVIEWING = "reviewing"
    RESOLVED = "resolved"
    CLOSED = "closed"


class FeedbackPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SmsType(str, enum.Enum):
    CLAIM = "claim"
    REMINDER = "reminder"
    VERIFICATION = "verification"
    NOTIFICATION = "notification"


class UrgencyLevel(str, enum.Enum):
    """Listing urgency, from the time left until its deadline"""

    CRITICAL = "critical"  # <= 6 hours
    HIGH = "high"  # <= 24 hours
    MEDIUM = "medium"  # <= 72 hours
    NORMAL = "normal"
    NONE = "none"  # no deadline or already past
