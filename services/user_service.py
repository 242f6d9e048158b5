from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
import re
import uuid

from app.clock import utcnow
from app.config import settings
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
    UnauthorizedError,
)
from domain.models import AppUser
from domain.schemas.user_schemas import SignupRequest, UserSettingsUpdate
from repositories import ApprovalCodeRepository, UserRepository
from services.sms_service import SmsService

logger = logging.getLogger("dogoods.users")

APPROVAL_NUMBER_PATTERN = re.compile(r"^[A-Za-z]{3}\d{6}$")


class UserService:
    @staticmethod
    def signup(db: Session, data: SignupRequest) -> AppUser:
        """
        Create a user account and redeem its approval code.

        The code row is locked, the user inserted and the code marked as
        claimed in one transaction; the user's community comes from the code.

        Raises:
            ServiceValidationError: malformed or unknown approval number
            ConflictError: email already registered or code already used
        """
        code_value = data.approval_number.strip().upper()
        if not APPROVAL_NUMBER_PATTERN.match(code_value):
            raise ServiceValidationError(
                "Invalid approval number format. Expected 3 letters followed by 6 digits"
            )

        user_repo = UserRepository(db)
        code_repo = ApprovalCodeRepository(db)

        try:
            if user_repo.get_by_email(data.email):
                raise ConflictError(f"Email already registered: {data.email}")

            code = code_repo.get_for_update(code_value)
            if not code:
                raise ServiceValidationError("Invalid approval number")
            if code.is_claimed:
                raise ConflictError("This approval number has already been used")

            user = AppUser(
                user_id=uuid.uuid4(),
                email=data.email.lower(),
                full_name=data.full_name,
                phone=SmsService.format_phone_number(data.phone) if data.phone else None,
                community_id=code.community_id,
                approval_number=code.code,
                sms_opt_in=data.sms_opt_in,
                sms_notifications_enabled=data.sms_opt_in,
                default_reminder_hours=settings.default_reminder_hours,
            )
            db.add(user)
            db.flush()

            code.is_claimed = True
            code.claimed_by = user.user_id
            code.claimed_at = utcnow()

            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError(f"Email already registered: {data.email}") from exc
        except Exception:
            db.rollback()
            raise

        db.refresh(user)
        logger.info("User signed up user_id=%s code=%s", user.user_id, code_value)
        return user

    @staticmethod
    def get_user(db: Session, user_id: uuid.UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def authenticate(db: Session, user_id: uuid.UUID) -> AppUser:
        """Resolve the caller forwarded by the auth gateway"""
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise UnauthorizedError("Unknown user")
        return user

    @staticmethod
    def update_settings(db: Session, user: AppUser, data: UserSettingsUpdate) -> AppUser:
        changes = data.model_dump(exclude_unset=True)
        if "phone" in changes and changes["phone"]:
            phone = SmsService.format_phone_number(changes["phone"])
            if not SmsService.is_valid_phone(phone):
                raise ServiceValidationError("Invalid phone number format")
            changes["phone"] = phone

        for field, value in changes.items():
            setattr(user, field, value)
        return UserRepository(db).update(user)

    @staticmethod
    def list_users(db: Session, skip: int = 0, limit: int = 100) -> List[AppUser]:
        return UserRepository(db).list_users(skip=skip, limit=limit)

    @staticmethod
    def set_admin(db: Session, actor: AppUser, user_id: uuid.UUID, is_admin: bool) -> AppUser:
        if actor.user_id == user_id and not is_admin:
            raise ForbiddenError("Admins cannot remove their own admin role")
        user = UserService.get_user(db, user_id)
        user.is_admin = is_admin
        user = UserRepository(db).update(user)
        logger.info("Admin flag changed user_id=%s is_admin=%s by=%s", user_id, is_admin, actor.user_id)
        return user
