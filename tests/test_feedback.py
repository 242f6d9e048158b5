"""
Feedback and in-app notification tests.
"""

import pytest
import uuid
from sqlalchemy.orm import Session

from test_fixtures import db_session, create_user
from app.exceptions import ForbiddenError, NotFoundError
from domain.enums import FeedbackPriority, FeedbackStatus, FeedbackType
from domain.schemas.feedback_schemas import FeedbackCreate, FeedbackUpdate
from services.feedback_service import FeedbackService
from services.notification_service import NotificationService


def feedback(**overrides):
    values = dict(
        feedback_type=FeedbackType.BUG,
        subject="Map does not load",
        message="The pickup map stays blank on my phone.",
        page_url="/listings",
    )
    values.update(overrides)
    return FeedbackCreate(**values)


def test_anonymous_feedback(db_session: Session):
    item = FeedbackService.submit_feedback(db_session, feedback(user_email="visitor@example.com"))

    assert item.user_id is None
    assert item.user_email == "visitor@example.com"
    assert item.status == FeedbackStatus.NEW
    assert item.priority == FeedbackPriority.MEDIUM


def test_signed_in_feedback_uses_account_email(db_session: Session):
    user = create_user(db_session)

    item = FeedbackService.submit_feedback(db_session, feedback(), user)

    assert item.user_id == user.user_id
    assert item.user_email == user.email
    assert FeedbackService.list_feedback(db_session, user_id=user.user_id) == [item]


def test_resolving_stamps_resolver(db_session: Session):
    admin = create_user(db_session, "admin")
    item = FeedbackService.submit_feedback(db_session, feedback())

    reviewing = FeedbackService.update_feedback(
        db_session, admin, item.feedback_id, FeedbackUpdate(status=FeedbackStatus.REVIEWING)
    )
    assert reviewing.resolved_by is None

    resolved = FeedbackService.update_feedback(
        db_session,
        admin,
        item.feedback_id,
        FeedbackUpdate(status=FeedbackStatus.RESOLVED, admin_notes="Fixed in the map widget"),
    )
    assert resolved.resolved_by == admin.user_id
    assert resolved.resolved_at is not None
    assert resolved.admin_notes == "Fixed in the map widget"


def test_filters_and_stats(db_session: Session):
    FeedbackService.submit_feedback(db_session, feedback())
    FeedbackService.submit_feedback(
        db_session, feedback(feedback_type=FeedbackType.FEATURE, priority=FeedbackPriority.HIGH)
    )
    FeedbackService.submit_feedback(db_session, feedback(feedback_type=FeedbackType.FEATURE))

    features = FeedbackService.list_feedback(db_session, feedback_type=FeedbackType.FEATURE)
    assert len(features) == 2

    stats = FeedbackService.feedback_stats(db_session)
    assert stats.total == 3
    assert stats.by_type == {"bug": 1, "feature": 2, "improvement": 0, "other": 0}
    assert stats.by_priority["high"] == 1
    assert stats.by_status["new"] == 3


def test_delete_feedback(db_session: Session):
    item = FeedbackService.submit_feedback(db_session, feedback())
    assert FeedbackService.delete_feedback(db_session, item.feedback_id) is True
    with pytest.raises(NotFoundError):
        FeedbackService.get_feedback(db_session, item.feedback_id)


# =============================================================================
# NOTIFICATIONS
# =============================================================================


def test_notifications_mark_read(db_session: Session):
    user = create_user(db_session)
    other = create_user(db_session, email="other@example.com")
    first = NotificationService.create_notification(
        db_session, user.user_id, "claim", "Claim confirmed", "You claimed Fresh apples"
    )
    NotificationService.create_notification(
        db_session, user.user_id, "claim", "Claim confirmed", "You claimed Sourdough loaves"
    )

    assert len(NotificationService.list_notifications(db_session, user.user_id, unread_only=True)) == 2

    with pytest.raises(ForbiddenError):
        NotificationService.mark_read(db_session, other, first.notification_id)

    assert NotificationService.mark_read(db_session, user, first.notification_id).read is True
    assert len(NotificationService.list_notifications(db_session, user.user_id, unread_only=True)) == 1

    assert NotificationService.mark_all_read(db_session, user.user_id) == 1
    assert NotificationService.list_notifications(db_session, user.user_id, unread_only=True) == []


def test_mark_read_unknown_notification(db_session: Session):
    user = create_user(db_session)
    with pytest.raises(NotFoundError):
        NotificationService.mark_read(db_session, user, uuid.uuid4())
