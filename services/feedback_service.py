from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from app.clock import utcnow
from app.exceptions import NotFoundError
from domain.enums import FeedbackPriority, FeedbackStatus, FeedbackType
from domain.models import AppUser, UserFeedback
from domain.schemas.feedback_schemas import FeedbackCreate, FeedbackStats, FeedbackUpdate
from repositories import FeedbackRepository

logger = logging.getLogger("dogoods.feedback")

RESOLVED_STATUSES = (FeedbackStatus.RESOLVED, FeedbackStatus.CLOSED)


class FeedbackService:
    @staticmethod
    def submit_feedback(
        db: Session, data: FeedbackCreate, user: Optional[AppUser] = None
    ) -> UserFeedback:
        """Store feedback; anonymous when no user is given"""
        feedback = UserFeedback(
            user_id=user.user_id if user else None,
            user_email=data.user_email or (user.email if user else None),
            feedback_type=data.feedback_type,
            subject=data.subject.strip(),
            message=data.message.strip(),
            page_url=data.page_url,
            browser_info=data.browser_info,
            screenshot_url=data.screenshot_url,
            status=FeedbackStatus.NEW,
            priority=data.priority,
        )
        feedback = FeedbackRepository(db).create(feedback)
        logger.info(
            "Feedback submitted id=%s type=%s user=%s",
            feedback.feedback_id,
            feedback.feedback_type.value,
            feedback.user_id,
        )
        return feedback

    @staticmethod
    def list_feedback(
        db: Session,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[FeedbackStatus] = None,
        feedback_type: Optional[FeedbackType] = None,
        priority: Optional[FeedbackPriority] = None,
    ) -> List[UserFeedback]:
        return FeedbackRepository(db).list_feedback(user_id, status, feedback_type, priority)

    @staticmethod
    def get_feedback(db: Session, feedback_id: uuid.UUID) -> UserFeedback:
        feedback = FeedbackRepository(db).get_by_id(feedback_id)
        if not feedback:
            raise NotFoundError(f"Feedback {feedback_id} not found")
        return feedback

    @staticmethod
    def update_feedback(
        db: Session, admin: AppUser, feedback_id: uuid.UUID, data: FeedbackUpdate
    ) -> UserFeedback:
        """Moving to resolved or closed stamps who resolved it and when"""
        feedback = FeedbackService.get_feedback(db, feedback_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(feedback, field, value)

        if changes.get("status") in RESOLVED_STATUSES:
            feedback.resolved_by = admin.user_id
            feedback.resolved_at = utcnow()
        return FeedbackRepository(db).update(feedback)

    @staticmethod
    def delete_feedback(db: Session, feedback_id: uuid.UUID) -> bool:
        FeedbackService.get_feedback(db, feedback_id)
        return FeedbackRepository(db).delete(feedback_id)

    @staticmethod
    def feedback_stats(db: Session) -> FeedbackStats:
        repo = FeedbackRepository(db)
        by_status = {s.value: 0 for s in FeedbackStatus}
        by_type = {t.value: 0 for t in FeedbackType}
        by_priority = {p.value: 0 for p in FeedbackPriority}
        by_status.update(repo.count_by(UserFeedback.status))
        by_type.update(repo.count_by(UserFeedback.feedback_type))
        by_priority.update(repo.count_by(UserFeedback.priority))
        return FeedbackStats(
            total=sum(by_status.values()),
            by_status=by_status,
            by_type=by_type,
            by_priority=by_priority,
        )
