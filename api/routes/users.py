"""User account routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas.user_schemas import (
    SetAdminRequest,
    SignupRequest,
    UserResponse,
    UserSettingsUpdate,
)
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.users")


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Create an account with a school approval code (e.g. LIN100001)."""
    user = UserService.signup(db, payload)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
def get_me(user: AppUser = Depends(get_current_user)):
    """Return the caller's profile."""
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
def update_settings(
    payload: UserSettingsUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update name, phone, SMS preferences or the default reminder lead time."""
    updated = UserService.update_settings(db, user, payload)
    return UserResponse.model_validate(updated)


@router.get("", response_model=List[UserResponse])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: list all users, newest first."""
    return [UserResponse.model_validate(u) for u in UserService.list_users(db, skip, limit)]


@router.put("/{user_id}/admin", response_model=UserResponse)
def set_admin(
    user_id: UUID,
    payload: SetAdminRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: grant or revoke the admin role."""
    user = UserService.set_admin(db, admin, user_id, payload.is_admin)
    return UserResponse.model_validate(user)
