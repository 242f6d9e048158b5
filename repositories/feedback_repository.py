"""
Feedback, notification and SMS log repositories
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import UserFeedback, Notification, SmsLog
from domain.enums import FeedbackPriority, FeedbackStatus, FeedbackType


class FeedbackRepository(BaseRepository[UserFeedback]):
    """Repository for user feedback"""

    def __init__(self, db: Session):
        super().__init__(db, UserFeedback)

    def get_by_id(self, feedback_id: UUID) -> Optional[UserFeedback]:
        return (
            self.db.query(UserFeedback)
            .filter(UserFeedback.feedback_id == feedback_id)
            .first()
        )

    def list_feedback(
        self,
        user_id: UUID = None,
        status: FeedbackStatus = None,
        feedback_type: FeedbackType = None,
        priority: FeedbackPriority = None,
    ) -> List[UserFeedback]:
        query = self.db.query(UserFeedback)
        if user_id:
            query = query.filter(UserFeedback.user_id == user_id)
        if status:
            query = query.filter(UserFeedback.status == status)
        if feedback_type:
            query = query.filter(UserFeedback.feedback_type == feedback_type)
        if priority:
            query = query.filter(UserFeedback.priority == priority)
        return query.order_by(UserFeedback.created_at.desc()).all()

    def count_by(self, column) -> dict:
        rows = (
            self.db.query(column, func.count(UserFeedback.feedback_id))
            .group_by(column)
            .all()
        )
        return {value.value if hasattr(value, "value") else value: count for value, count in rows}


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.notification_id == notification_id)
            .first()
        )

    def list_for_user(self, user_id: UUID, unread_only: bool = False) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return query.order_by(Notification.created_at.desc()).all()


class SmsLogRepository(BaseRepository[SmsLog]):
    def __init__(self, db: Session):
        super().__init__(db, SmsLog)

    def list_recent(self, limit: int = 100) -> List[SmsLog]:
        return self.db.query(SmsLog).order_by(SmsLog.sent_at.desc()).limit(limit).all()
