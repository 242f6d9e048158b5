"""
Scheduled jobs triggered by the external cron through /functions endpoints.
"""

from datetime import date, datetime, time
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
import logging

from app.clock import utcnow
from app.exceptions import DoGoodsError
from domain.schemas.receipt_schemas import PickupReminder
from repositories import ClaimRepository, UserRepository
from services.notification_service import NotificationService
from services.receipt_service import ReceiptService
from services.sms_service import SmsService

logger = logging.getLogger("dogoods.jobs")

PICKUP_REMINDER_TYPE = "pickup_reminder"


def format_pickup_date(d: date) -> str:
    """e.g. 'Friday, March 6, 2026'"""
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def format_pickup_time(t: Optional[time]) -> str:
    """e.g. '3:30 PM'; 'TBD' when no time was chosen"""
    if t is None:
        return "TBD"
    hour = t.hour % 12 or 12
    return f"{hour}:{t.minute:02d} {'AM' if t.hour < 12 else 'PM'}"


def reminder_message(pickup: PickupReminder) -> str:
    place = f" at {pickup.pickup_place}" if pickup.pickup_place else ""
    return (
        "Don't forget! Your food pickup is scheduled for "
        f"{format_pickup_date(pickup.pickup_date)} at "
        f"{format_pickup_time(pickup.pickup_time)}{place}."
    )


class JobService:
    @staticmethod
    def run_expire_receipts(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utcnow()
        count = ReceiptService.expire_unclaimed_receipts(db, now)
        return {
            "success": True,
            "expired_count": count,
            "message": f"Successfully expired {count} receipt(s)",
            "timestamp": now,
        }

    @staticmethod
    def process_pickup_reminders(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Create a pickup reminder notification for every claim whose reminder
        window is open, mark the reminder sent, and text opted-in claimers.

        Each pickup is committed on its own; failures are collected in
        ``results.errors`` and do not stop the run.
        """
        now = now or utcnow()
        claim_repo = ClaimRepository(db)
        user_repo = UserRepository(db)

        pickups = claim_repo.get_pickups_needing_reminders(now)
        results: Dict[str, Any] = {"reminders_created": 0, "errors": []}

        for pickup in pickups:
            try:
                NotificationService.create_notification(
                    db,
                    user_id=pickup.claimer_id,
                    type=PICKUP_REMINDER_TYPE,
                    title="Pickup Reminder",
                    message=reminder_message(pickup),
                    data=pickup.as_notification_data(),
                    commit=False,
                )
                claim_repo.mark_reminder_sent(pickup.claim_id, commit=False)
                db.commit()
                results["reminders_created"] += 1
            except Exception as exc:
                db.rollback()
                logger.exception("Reminder failed for claim %s", pickup.claim_id)
                results["errors"].append(
                    f"Error processing pickup {pickup.claim_id}: {exc}"
                )
                continue

            claimer = user_repo.get_by_id(pickup.claimer_id)
            if claimer and claimer.phone and claimer.sms_opt_in and claimer.sms_notifications_enabled:
                try:
                    SmsService.send_pickup_reminder(
                        db,
                        claimer_phone=claimer.phone,
                        claimer_name=claimer.full_name or "there",
                        food_title=pickup.food_title or "your food",
                        pickup_location=pickup.pickup_place,
                        pickup_time=(
                            f"{format_pickup_date(pickup.pickup_date)} "
                            f"{format_pickup_time(pickup.pickup_time)}"
                        ),
                    )
                except DoGoodsError as exc:
                    results["errors"].append(
                        f"Failed to send SMS reminder for claim {pickup.claim_id}: {exc}"
                    )

        logger.info(
            "Pickup reminders processed=%d created=%d errors=%d",
            len(pickups),
            results["reminders_created"],
            len(results["errors"]),
        )
        return {
            "success": True,
            "processed": len(pickups),
            "results": results,
            "timestamp": now,
        }
