from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from app.exceptions import ForbiddenError, NotFoundError
from domain.models import AppUser, Notification
from repositories import NotificationRepository

logger = logging.getLogger("dogoods.notifications")


class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: uuid.UUID,
        type: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        commit: bool = True,
    ) -> Notification:
        notification = Notification(
            user_id=user_id, type=type, title=title, message=message, read=False, data=data
        )
        return NotificationRepository(db).create(notification, commit=commit)

    @staticmethod
    def list_notifications(
        db: Session, user_id: uuid.UUID, unread_only: bool = False
    ) -> List[Notification]:
        return NotificationRepository(db).list_for_user(user_id, unread_only)

    @staticmethod
    def mark_read(db: Session, actor: AppUser, notification_id: uuid.UUID) -> Notification:
        repo = NotificationRepository(db)
        notification = repo.get_by_id(notification_id)
        if not notification:
            raise NotFoundError(f"Notification {notification_id} not found")
        if notification.user_id != actor.user_id:
            raise ForbiddenError("You can only update your own notifications")
        notification.read = True
        return repo.update(notification)

    @staticmethod
    def mark_all_read(db: Session, user_id: uuid.UUID) -> int:
        notifications = NotificationRepository(db).list_for_user(user_id, unread_only=True)
        for n in notifications:
            n.read = True
        db.commit()
        return len(notifications)
