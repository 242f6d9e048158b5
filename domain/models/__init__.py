"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    drop_database,
    get_db_session,
)
from domain.models.user import AppUser
from domain.models.community import Community, ApprovalCode
from domain.models.listing import FoodListing, FoodClaim, Receipt
from domain.models.messaging import Conversation, Message
from domain.models.verification import VerificationDispute, VerificationLog
from domain.models.feedback import UserFeedback, Notification, SmsLog

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "drop_database",
    "get_db_session",
    # User and community models
    "AppUser",
    "Community",
    "ApprovalCode",
    # Listing lifecycle models
    "FoodListing",
    "FoodClaim",
    "Receipt",
    # Messaging models
    "Conversation",
    "Message",
    # Verification models
    "VerificationDispute",
    "VerificationLog",
    # Feedback and notification models
    "UserFeedback",
    "Notification",
    "SmsLog",
]
