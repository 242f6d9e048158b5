"""
Claim and receipt lifecycle.

Claims aggregate into a pending receipt per user and pickup location. A
receipt then moves ``pending -> completed`` (pickup), ``pending -> expired``
(deadline passed) or, once expired, is reclaimed into a new pending receipt.
Each transition writes the receipt, its claims and their listings in one
transaction.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from app.clock import next_weekly_deadline, utcnow
from app.config import settings
from app.exceptions import (
    ConflictError,
    DoGoodsError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
)
from domain.enums import CLAIMABLE_LISTING_STATUSES, ClaimStatus, ListingStatus, ReceiptStatus
from domain.models import AppUser, FoodClaim, FoodListing, Receipt
from domain.schemas.receipt_schemas import ClaimCreate
from repositories import ClaimRepository, ListingRepository, ReceiptRepository
from services import urgency_service
from services.sms_service import SmsService

logger = logging.getLogger("dogoods.receipts")

NOTHING_TO_RECLAIM = "None of the items are available anymore"


class ReceiptService:
    @staticmethod
    def pickup_deadline(now: datetime, listing_deadlines: List[Optional[datetime]] = ()) -> datetime:
        """Next weekly pickup deadline, or an earlier listing deadline"""
        deadline = next_weekly_deadline(
            now, settings.receipt_pickup_weekday, settings.receipt_pickup_hour
        )
        for candidate in listing_deadlines:
            if candidate and now < candidate < deadline:
                deadline = candidate
        return deadline

    @staticmethod
    def pickup_details(listing: FoodListing) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """(location, address, window) from the listing's community, else its address"""
        community = listing.community
        if community:
            return (
                community.name,
                community.location or listing.full_address,
                community.hours,
            )
        return listing.full_address, listing.full_address, None

    # ------------------------------------------------------------------
    # Claim aggregation
    # ------------------------------------------------------------------

    @staticmethod
    def create_claim(
        db: Session, user: AppUser, data: ClaimCreate, now: Optional[datetime] = None
    ) -> Tuple[FoodClaim, Receipt]:
        """
        Claim a listing and add it to the user's pending receipt.

        The listing row is locked; it must be claimable and not the user's
        own. The claim goes onto the user's pending receipt for the same
        pickup location, or onto a new receipt due at the next weekly
        deadline.

        Returns:
            (claim, receipt)

        Raises:
            NotFoundError: listing does not exist
            ServiceValidationError: user claims their own listing
            ConflictError: listing is not claimable or its deadline passed
        """
        now = now or utcnow()
        listing_repo = ListingRepository(db)
        receipt_repo = ReceiptRepository(db)

        try:
            listing = listing_repo.get_for_update(data.food_id)
            if not listing:
                raise NotFoundError(f"Listing {data.food_id} not found")
            if listing.user_id == user.user_id:
                raise ServiceValidationError("You cannot claim your own listing")
            if listing.status not in CLAIMABLE_LISTING_STATUSES:
                raise ConflictError(
                    f"Listing is not available for claiming (status: {listing.status.value})"
                )
            if urgency_service.is_expired(listing, now):
                raise ConflictError("Listing has expired")

            location, address, window = ReceiptService.pickup_details(listing)
            receipt = receipt_repo.find_pending_for_location(user.user_id, location, now)
            if receipt is None:
                receipt = Receipt(
                    user_id=user.user_id,
                    status=ReceiptStatus.PENDING,
                    pickup_location=location,
                    pickup_address=address,
                    pickup_window=window,
                    claimed_at=now,
                    pickup_by=ReceiptService.pickup_deadline(now, [listing.pickup_by]),
                )
                db.add(receipt)
                db.flush()
            elif listing.pickup_by and now < listing.pickup_by < receipt.pickup_by:
                receipt.pickup_by = listing.pickup_by

            claim = FoodClaim(
                food_id=listing.listing_id,
                claimer_id=user.user_id,
                receipt_id=receipt.receipt_id,
                status=ClaimStatus.APPROVED,
                pickup_date=data.pickup_date,
                pickup_time=data.pickup_time,
                pickup_place=data.pickup_place or location,
                reminder_hours_before=(
                    data.reminder_hours_before or user.default_reminder_hours
                ),
                members_count=data.members_count,
                dietary_restrictions=data.dietary_restrictions,
                notes=data.notes,
            )
            db.add(claim)

            listing.status = ListingStatus.CLAIMED
            listing.claimed_by = user.user_id

            db.commit()
        except Exception:
            db.rollback()
            raise

        # Reload so the receipt's item list includes the new claim
        db.refresh(receipt)
        logger.info(
            "Claim created claim_id=%s listing=%s user=%s receipt=%s",
            claim.claim_id,
            listing.listing_id,
            user.user_id,
            receipt.receipt_id,
        )
        ReceiptService._notify_donor(db, listing, user, location)
        return claim, receipt

    @staticmethod
    def _notify_donor(db: Session, listing: FoodListing, claimer: AppUser, location) -> None:
        """Best-effort SMS to the donor; a failed SMS never fails the claim"""
        if not settings.twilio_configured() or not listing.donor_phone:
            return
        try:
            SmsService.send_claim_notification(
                db,
                donor_phone=listing.donor_phone,
                donor_name=listing.donor_name or "there",
                claimer_name=claimer.full_name or "A neighbor",
                food_title=listing.title,
                pickup_location=location,
            )
        except DoGoodsError as exc:
            logger.warning("Claim SMS to donor not sent listing=%s: %s", listing.listing_id, exc)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @staticmethod
    def mark_picked_up(
        db: Session, receipt_id: uuid.UUID, actor: AppUser, now: Optional[datetime] = None
    ) -> Receipt:
        """
        pending -> completed. Completes every claim on the receipt and their
        listings (removed from inventory for good).
        """
        now = now or utcnow()
        receipt_repo = ReceiptRepository(db)
        try:
            receipt = receipt_repo.get_for_update(receipt_id)
            if not receipt:
                raise NotFoundError(f"Receipt {receipt_id} not found")
            if receipt.user_id != actor.user_id and not actor.is_admin:
                raise ForbiddenError("Only the receipt owner or an admin can mark it picked up")
            if receipt.status != ReceiptStatus.PENDING:
                raise ConflictError(
                    f"Receipt is {receipt.status.value}; only pending receipts can be picked up"
                )

            receipt.status = ReceiptStatus.COMPLETED
            receipt.picked_up_at = now

            claims = ClaimRepository(db).get_by_receipt(receipt_id)
            for claim in claims:
                claim.status = ClaimStatus.COMPLETED
            for listing in ListingRepository(db).get_many_for_update([c.food_id for c in claims]):
                listing.status = ListingStatus.COMPLETED

            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Receipt picked up receipt_id=%s items=%d by=%s", receipt_id, len(claims), actor.user_id
        )
        return receipt_repo.get_by_id(receipt_id)

    @staticmethod
    def expire_unclaimed_receipts(db: Session, now: Optional[datetime] = None) -> int:
        """
        pending -> expired for every receipt past its pickup deadline, with
        inventory returned. Idempotent.

        Returns:
            Number of receipts expired by this call
        """
        now = now or utcnow()
        try:
            count = ReceiptRepository(db).expire_unclaimed_receipts(now)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Receipt expiry failed")
            raise

        logger.info("Expired %d receipt(s) and returned items to inventory", count)
        return count

    @staticmethod
    def reclaim_expired(
        db: Session, receipt_id: uuid.UUID, user: AppUser, now: Optional[datetime] = None
    ) -> Tuple[Receipt, int, int]:
        """
        expired -> new pending receipt, for the items that are still claimable.

        Returns:
            (new_receipt, reclaimed_count, unavailable_count)

        Raises:
            ConflictError: receipt not expired, or none of its items are
                available anymore (no receipt is created in that case)
        """
        now = now or utcnow()
        receipt_repo = ReceiptRepository(db)
        try:
            old = receipt_repo.get_for_update(receipt_id)
            if not old:
                raise NotFoundError(f"Receipt {receipt_id} not found")
            if old.user_id != user.user_id:
                raise ForbiddenError("Only the receipt owner can reclaim it")
            if old.status != ReceiptStatus.EXPIRED:
                raise ConflictError(
                    f"Receipt is {old.status.value}; only expired receipts can be reclaimed"
                )

            claims = [
                c
                for c in ClaimRepository(db).get_by_receipt(receipt_id)
                if c.claimer_id == user.user_id
            ]
            listings = {
                l.listing_id: l
                for l in ListingRepository(db).get_many_for_update([c.food_id for c in claims])
            }
            kept = [
                c
                for c in claims
                if c.food_id in listings
                and listings[c.food_id].status in CLAIMABLE_LISTING_STATUSES
                and not urgency_service.is_expired(listings[c.food_id], now)
            ]
            if not kept:
                raise ConflictError(NOTHING_TO_RECLAIM)

            new_receipt = Receipt(
                user_id=user.user_id,
                status=ReceiptStatus.PENDING,
                pickup_location=old.pickup_location,
                pickup_address=old.pickup_address,
                pickup_window=old.pickup_window,
                claimed_at=now,
                pickup_by=ReceiptService.pickup_deadline(
                    now, [listings[c.food_id].pickup_by for c in kept]
                ),
                reclaimed_from_id=old.receipt_id,
            )
            db.add(new_receipt)
            db.flush()

            for claim in kept:
                listing = listings[claim.food_id]
                listing.status = ListingStatus.CLAIMED
                listing.claimed_by = user.user_id
                claim.receipt_id = new_receipt.receipt_id
                claim.status = ClaimStatus.APPROVED
                claim.reminder_sent = False

            db.commit()
        except Exception:
            db.rollback()
            raise

        unavailable = len(claims) - len(kept)
        logger.info(
            "Receipt reclaimed old=%s new=%s reclaimed=%d unavailable=%d",
            receipt_id,
            new_receipt.receipt_id,
            len(kept),
            unavailable,
        )
        return receipt_repo.get_by_id(new_receipt.receipt_id), len(kept), unavailable

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def get_receipt(db: Session, receipt_id: uuid.UUID, actor: AppUser) -> Receipt:
        receipt = ReceiptRepository(db).get_by_id(receipt_id)
        if not receipt:
            raise NotFoundError(f"Receipt {receipt_id} not found")
        if receipt.user_id != actor.user_id and not actor.is_admin:
            raise ForbiddenError("You can only view your own receipts")
        return receipt

    @staticmethod
    def list_receipts(
        db: Session, user_id: uuid.UUID, status: Optional[ReceiptStatus] = None
    ) -> List[Receipt]:
        return ReceiptRepository(db).list_for_user(user_id, status)

    @staticmethod
    def get_active_receipts(db: Session, user_id: uuid.UUID) -> List[Receipt]:
        """Pending receipts, newest first"""
        return ReceiptRepository(db).list_for_user(user_id, ReceiptStatus.PENDING)

    @staticmethod
    def list_claims(db: Session, user_id: uuid.UUID) -> List[FoodClaim]:
        return ClaimRepository(db).list_for_user(user_id)
