"""User feedback routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_current_user, get_db, get_optional_user, require_admin
from api.responses import ERROR_RESPONSES
from domain.enums import FeedbackPriority, FeedbackStatus, FeedbackType
from domain.models import AppUser
from domain.schemas.feedback_schemas import (
    FeedbackCreate,
    FeedbackResponse,
    FeedbackStats,
    FeedbackUpdate,
)
from services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["Feedback"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.feedback")


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    payload: FeedbackCreate,
    user: Optional[AppUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Submit feedback. Works without X-User-Id for anonymous visitors."""
    return FeedbackResponse.model_validate(FeedbackService.submit_feedback(db, payload, user))


@router.get("/me", response_model=List[FeedbackResponse])
def list_my_feedback(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        FeedbackResponse.model_validate(f)
        for f in FeedbackService.list_feedback(db, user_id=user.user_id)
    ]


@router.get("", response_model=List[FeedbackResponse])
def list_feedback(
    status: Optional[FeedbackStatus] = None,
    feedback_type: Optional[FeedbackType] = None,
    priority: Optional[FeedbackPriority] = None,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items = FeedbackService.list_feedback(
        db, status=status, feedback_type=feedback_type, priority=priority
    )
    return [FeedbackResponse.model_validate(f) for f in items]


@router.get("/stats", response_model=FeedbackStats)
def feedback_stats(admin: AppUser = Depends(require_admin), db: Session = Depends(get_db)):
    return FeedbackService.feedback_stats(db)


@router.patch("/{feedback_id}", response_model=FeedbackResponse)
def update_feedback(
    feedback_id: UUID,
    payload: FeedbackUpdate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    feedback = FeedbackService.update_feedback(db, admin, feedback_id, payload)
    return FeedbackResponse.model_validate(feedback)


@router.delete("/{feedback_id}")
def delete_feedback(
    feedback_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    FeedbackService.delete_feedback(db, feedback_id)
    return {"status": "ok", "deleted": str(feedback_id)}
