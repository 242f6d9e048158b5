"""
SMS dispatch through Twilio with opt-in checks and delivery logging.
"""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from adapters import sms_adapter
from app.exceptions import ExternalServiceError, ServiceValidationError
from domain.enums import SmsType
from domain.models import SmsLog
from repositories import SmsLogRepository, UserRepository

logger = logging.getLogger("dogoods.sms")

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
_NON_DIGITS = re.compile(r"\D")
_SEPARATORS = re.compile(r"[\s()\-]")


class SmsService:
    @staticmethod
    def format_phone_number(phone: str) -> str:
        """
        Normalize a phone number to E.164.

        10 digits are treated as a US number (+1 prefix); 11 digits starting
        with 1 just get a '+'. Anything else keeps its leading '+' or gets one.
        """
        phone = phone or ""
        cleaned = _NON_DIGITS.sub("", phone)
        if len(cleaned) == 10:
            return f"+1{cleaned}"
        if len(cleaned) == 11 and cleaned.startswith("1"):
            return f"+{cleaned}"
        if phone.startswith("+"):
            return _SEPARATORS.sub("", phone)
        return f"+{cleaned}"

    @staticmethod
    def is_valid_phone(phone: str) -> bool:
        return bool(PHONE_PATTERN.match(_SEPARATORS.sub("", phone or "")))

    @staticmethod
    def check_user_opt_in(db: Session, phone: str) -> bool:
        """True when a user with this phone opted in and has SMS enabled"""
        user = UserRepository(db).get_by_phone(SmsService.format_phone_number(phone))
        if not user:
            return False
        return bool(user.sms_opt_in and user.sms_notifications_enabled)

    @staticmethod
    def send_sms(
        db: Session,
        to: str,
        message: str,
        sms_type: SmsType = SmsType.NOTIFICATION,
        skip_opt_in_check: bool = False,
    ) -> Dict[str, Any]:
        """
        Send an SMS and record the attempt in the SMS log.

        Verification codes skip the opt-in check; every other type requires
        the recipient to be an opted-in user.

        Raises:
            ServiceValidationError: missing fields, invalid number or no opt-in
            ExternalServiceError: Twilio is not configured or rejected the message
        """
        if not to or not message:
            raise ServiceValidationError("Missing required fields: to and message")

        sms_type = SmsType(sms_type)
        if not skip_opt_in_check and sms_type != SmsType.VERIFICATION:
            if not SmsService.check_user_opt_in(db, to):
                raise ServiceValidationError(
                    "User has not opted in to receive SMS notifications"
                )

        formatted = SmsService.format_phone_number(to)
        if not SmsService.is_valid_phone(formatted):
            raise ServiceValidationError("Invalid phone number format")

        log_repo = SmsLogRepository(db)
        try:
            result = sms_adapter.send_message(formatted, message)
        except ExternalServiceError as exc:
            log_repo.create(
                SmsLog(
                    phone_number=formatted,
                    message=message,
                    type=sms_type.value,
                    status="failed",
                    error=exc.message,
                )
            )
            logger.warning("SMS failed to=%s type=%s: %s", formatted, sms_type.value, exc)
            raise

        log_repo.create(
            SmsLog(
                phone_number=formatted,
                message=message,
                type=sms_type.value,
                status="sent",
                twilio_sid=result.get("sid"),
            )
        )
        logger.info("SMS sent to=%s type=%s sid=%s", formatted, sms_type.value, result.get("sid"))
        return {"success": True, "message_sid": result.get("sid"), "status": result.get("status")}

    # ------------------------------------------------------------------
    # Message templates
    # ------------------------------------------------------------------

    @staticmethod
    def send_claim_notification(
        db: Session,
        donor_phone: str,
        donor_name: str,
        claimer_name: str,
        food_title: str,
        pickup_location: Optional[str],
    ):
        message = (
            f"Hi {donor_name}, great news! {claimer_name} has claimed your "
            f'"{food_title}". Pickup location: {pickup_location}. '
            "Thank you for sharing! - DoGoods"
        )
        return SmsService.send_sms(db, donor_phone, message, SmsType.CLAIM)

    @staticmethod
    def send_claim_confirmation(
        db: Session,
        claimer_phone: str,
        claimer_name: str,
        food_title: str,
        pickup_location: Optional[str],
        pickup_deadline: str,
    ):
        message = (
            f'Hi {claimer_name}, you\'ve successfully claimed "{food_title}"! '
            f"Pick up at {pickup_location} by {pickup_deadline}. See you soon! - DoGoods"
        )
        return SmsService.send_sms(db, claimer_phone, message, SmsType.CLAIM)

    @staticmethod
    def send_pickup_reminder(
        db: Session,
        claimer_phone: str,
        claimer_name: str,
        food_title: str,
        pickup_location: Optional[str],
        pickup_time: str,
    ):
        message = (
            f'Hi {claimer_name}, reminder: Pick up "{food_title}" at {pickup_location} '
            f"by {pickup_time}. Questions? Contact the community location. - DoGoods"
        )
        return SmsService.send_sms(db, claimer_phone, message, SmsType.REMINDER)

    @staticmethod
    def send_verification_code(db: Session, phone: str, code: str):
        message = f"Your DoGoods verification code is: {code}. This code expires in 10 minutes."
        return SmsService.send_sms(db, phone, message, SmsType.VERIFICATION)

    @staticmethod
    def send_new_listing_notification(
        db: Session, user_phone: str, user_name: str, food_title: str, location: str
    ):
        message = (
            f'Hi {user_name}, new food available near you: "{food_title}" at '
            f"{location}. Claim it now on DoGoods!"
        )
        return SmsService.send_sms(db, user_phone, message, SmsType.NOTIFICATION)
