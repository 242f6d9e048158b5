"""In-app notification and admin SMS routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas.notification_schemas import NotificationResponse, SmsRequest, SmsResponse
from services.notification_service import NotificationService
from services.sms_service import SmsService

router = APIRouter(tags=["Notifications"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.notifications")


@router.get("/notifications", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = Query(False),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notifications = NotificationService.list_notifications(db, user.user_id, unread_only)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/notifications/read-all")
def mark_all_read(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"status": "ok", "updated": NotificationService.mark_all_read(db, user.user_id)}


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return NotificationResponse.model_validate(
        NotificationService.mark_read(db, user, notification_id)
    )


@router.post("/sms/send", response_model=SmsResponse)
def send_sms(
    payload: SmsRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: send an SMS through Twilio. Non-verification messages need recipient opt-in."""
    logger.info("Admin SMS requested by=%s type=%s", admin.user_id, payload.type.value)
    return SmsService.send_sms(db, payload.to, payload.message, payload.type)
