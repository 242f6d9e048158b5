"""
Receipt and claim repositories.

Lifecycle writes here never commit: the receipt service owns the
transaction and commits once all rows of a transition are written.
"""

import logging
from datetime import datetime, timedelta, time
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import Receipt, FoodClaim, FoodListing
from domain.enums import ClaimStatus, ListingStatus, ReceiptStatus
from domain.schemas.receipt_schemas import PickupReminder

logger = logging.getLogger("dogoods.repositories.receipts")

DEFAULT_PICKUP_TIME = time(12, 0)


class ReceiptRepository(BaseRepository[Receipt]):
    """Repository for receipt data access"""

    def __init__(self, db: Session):
        super().__init__(db, Receipt)

    def _with_items(self):
        return self.db.query(Receipt).options(
            selectinload(Receipt.claims).selectinload(FoodClaim.listing)
        )

    def get_by_id(self, receipt_id: UUID) -> Optional[Receipt]:
        """Get receipt with its claims and their listings"""
        return self._with_items().filter(Receipt.receipt_id == receipt_id).first()

    def get_for_update(self, receipt_id: UUID) -> Optional[Receipt]:
        return (
            self.db.query(Receipt)
            .filter(Receipt.receipt_id == receipt_id)
            .with_for_update()
            .first()
        )

    def find_pending_for_location(
        self, user_id: UUID, pickup_location: Optional[str], now: datetime
    ) -> Optional[Receipt]:
        """The user's open receipt for a pickup location, if its deadline is still ahead"""
        query = self.db.query(Receipt).filter(
            Receipt.user_id == user_id,
            Receipt.status == ReceiptStatus.PENDING,
            Receipt.pickup_by > now,
        )
        if pickup_location is None:
            query = query.filter(Receipt.pickup_location.is_(None))
        else:
            query = query.filter(Receipt.pickup_location == pickup_location)
        return query.order_by(Receipt.claimed_at.desc()).with_for_update().first()

    def list_for_user(
        self, user_id: UUID, status: ReceiptStatus = None
    ) -> List[Receipt]:
        query = self._with_items().filter(Receipt.user_id == user_id)
        if status:
            query = query.filter(Receipt.status == status)
        return query.order_by(Receipt.claimed_at.desc()).all()

    def expire_unclaimed_receipts(self, now: datetime) -> int:
        """
        Expire pending receipts whose pickup deadline has passed.

        Sets each receipt to expired, its claims to expired and returns its
        still-claimed listings to inventory (available). Runs inside the
        caller's transaction.

        Returns:
            Number of receipts expired
        """
        receipts = (
            self.db.query(Receipt)
            .filter(Receipt.status == ReceiptStatus.PENDING, Receipt.pickup_by < now)
            .with_for_update()
            .all()
        )
        if not receipts:
            return 0

        receipt_ids = [r.receipt_id for r in receipts]
        for receipt in receipts:
            receipt.status = ReceiptStatus.EXPIRED
            receipt.expired_at = now

        claims = (
            self.db.query(FoodClaim).filter(FoodClaim.receipt_id.in_(receipt_ids)).all()
        )
        food_ids = [c.food_id for c in claims]
        for claim in claims:
            claim.status = ClaimStatus.EXPIRED

        if food_ids:
            listings = (
                self.db.query(FoodListing)
                .filter(
                    FoodListing.listing_id.in_(food_ids),
                    FoodListing.status == ListingStatus.CLAIMED,
                )
                .with_for_update()
                .all()
            )
            for listing in listings:
                listing.status = ListingStatus.AVAILABLE
                listing.claimed_by = None

        self.db.flush()
        return len(receipts)


class ClaimRepository(BaseRepository[FoodClaim]):
    """Repository for food claim data access"""

    def __init__(self, db: Session):
        super().__init__(db, FoodClaim)

    def get_by_id(self, claim_id: UUID) -> Optional[FoodClaim]:
        return self.db.query(FoodClaim).filter(FoodClaim.claim_id == claim_id).first()

    def get_by_receipt(self, receipt_id: UUID) -> List[FoodClaim]:
        return (
            self.db.query(FoodClaim)
            .options(selectinload(FoodClaim.listing))
            .filter(FoodClaim.receipt_id == receipt_id)
            .all()
        )

    def list_for_user(self, claimer_id: UUID) -> List[FoodClaim]:
        return (
            self.db.query(FoodClaim)
            .filter(FoodClaim.claimer_id == claimer_id)
            .order_by(FoodClaim.created_at.desc())
            .all()
        )

    def get_pickups_needing_reminders(self, now: datetime) -> List[PickupReminder]:
        """
        Approved claims whose reminder window is open and whose reminder has
        not been sent yet.

        The window is ``pickup_at - reminder_hours_before <= now < pickup_at``
        where ``pickup_at`` combines pickup_date with pickup_time (noon when
        unset). The date part is filtered in SQL, the window in Python.
        """
        horizon = (now + timedelta(hours=168)).date()
        candidates = (
            self.db.query(FoodClaim)
            .options(selectinload(FoodClaim.listing))
            .filter(
                FoodClaim.status == ClaimStatus.APPROVED,
                FoodClaim.reminder_sent.is_(False),
                FoodClaim.pickup_date.isnot(None),
                FoodClaim.pickup_date >= now.date(),
                FoodClaim.pickup_date <= horizon,
            )
            .order_by(FoodClaim.pickup_date, FoodClaim.pickup_time)
            .all()
        )

        due: List[PickupReminder] = []
        for claim in candidates:
            pickup_at = datetime.combine(
                claim.pickup_date, claim.pickup_time or DEFAULT_PICKUP_TIME
            )
            window_start = pickup_at - timedelta(hours=claim.reminder_hours_before)
            if window_start <= now < pickup_at:
                due.append(
                    PickupReminder(
                        claim_id=claim.claim_id,
                        claimer_id=claim.claimer_id,
                        food_id=claim.food_id,
                        food_title=claim.listing.title if claim.listing else None,
                        pickup_date=claim.pickup_date,
                        pickup_time=claim.pickup_time,
                        pickup_place=claim.pickup_place,
                        reminder_hours_before=claim.reminder_hours_before,
                    )
                )
        logger.debug("Found %d of %d candidate claims due for reminders", len(due), len(candidates))
        return due

    def mark_reminder_sent(self, claim_id: UUID, commit: bool = True) -> bool:
        claim = self.get_by_id(claim_id)
        if not claim:
            return False
        claim.reminder_sent = True
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return True
