"""Services package - Business logic layer"""

from services.user_service import UserService
from services.community_service import CommunityService
from services.approval_code_service import ApprovalCodeService
from services.listing_service import ListingService
from services.receipt_service import ReceiptService
from services.job_service import JobService
from services.messaging_service import MessagingService
from services.verification_service import VerificationService
from services.feedback_service import FeedbackService
from services.notification_service import NotificationService
from services.sms_service import SmsService

# Note: urgency_service and realtime contain module-level helpers, not a class

__all__ = [
    "UserService",
    "CommunityService",
    "ApprovalCodeService",
    "ListingService",
    "ReceiptService",
    "JobService",
    "MessagingService",
    "VerificationService",
    "FeedbackService",
    "NotificationService",
    "SmsService",
]
