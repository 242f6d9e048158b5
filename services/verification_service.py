"""
Before/after pickup verification, disputes and the verification audit log.

The donor verifies a listing before pickup, the claimer after pickup; once
both checks are done the listing's verification is completed. Any
participant can raise a dispute, which admins resolve or dismiss.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from adapters import storage_adapter
from app.clock import utcnow
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.enums import DisputeStatus, VerificationStatus, VerificationType
from domain.models import AppUser, FoodListing, VerificationDispute, VerificationLog
from domain.schemas.verification_schemas import DisputeCreate
from repositories import DisputeRepository, ListingRepository, VerificationLogRepository

logger = logging.getLogger("dogoods.verification")

ALLOWED_PHOTO_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}
FINAL_STATUSES = (VerificationStatus.DISPUTED, VerificationStatus.SKIPPED)


class VerificationService:
    @staticmethod
    def _get_listing(db: Session, listing_id: uuid.UUID) -> FoodListing:
        listing = ListingRepository(db).get_by_id(listing_id)
        if not listing:
            raise NotFoundError(f"Listing {listing_id} not found")
        return listing

    @staticmethod
    def _is_participant(listing: FoodListing, actor: AppUser) -> bool:
        return actor.user_id in (listing.user_id, listing.claimed_by)

    @staticmethod
    def _check_verifiable(listing: FoodListing) -> None:
        if listing.verification_status in FINAL_STATUSES:
            raise ConflictError(
                f"Listing verification is {listing.verification_status.value}"
            )

    @staticmethod
    def photo_path(
        listing_id: uuid.UUID, verification_type: VerificationType, extension: str, now: datetime
    ) -> str:
        # Naive timestamps are UTC
        ts_ms = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000)
        kind = VerificationType(verification_type).value
        return f"verification/{listing_id}/{listing_id}_{kind}_{ts_ms}.{extension}"

    @staticmethod
    def upload_photo(
        db: Session,
        actor: AppUser,
        listing_id: uuid.UUID,
        verification_type: VerificationType,
        filename: str,
        content: bytes,
        now: Optional[datetime] = None,
    ) -> Tuple[str, str]:
        """
        Store a verification photo.

        Returns:
            (storage path, public URL)
        """
        listing = VerificationService._get_listing(db, listing_id)
        if not (VerificationService._is_participant(listing, actor) or actor.is_admin):
            raise ForbiddenError("Only the donor or claimer can upload verification photos")

        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if extension not in ALLOWED_PHOTO_EXTENSIONS:
            raise ServiceValidationError(
                f"Unsupported file type '{extension}'. Allowed: "
                + ", ".join(sorted(ALLOWED_PHOTO_EXTENSIONS))
            )
        if not content:
            raise ServiceValidationError("Uploaded file is empty")

        path = VerificationService.photo_path(
            listing_id, verification_type, extension, now or utcnow()
        )
        url = storage_adapter.save_file(path, content)
        return path, url

    @staticmethod
    def verify_before_pickup(
        db: Session, actor: AppUser, listing_id: uuid.UUID, photos: List[str], notes: Optional[str]
    ) -> FoodListing:
        listing = VerificationService._get_listing(db, listing_id)
        if listing.user_id != actor.user_id:
            raise ForbiddenError("Only the donor can verify before pickup")
        VerificationService._check_verifiable(listing)
        if listing.verified_before_pickup:
            raise ConflictError("Listing was already verified before pickup")

        listing.verified_before_pickup = True
        listing.verification_before_photos = list(photos)
        listing.verification_before_notes = notes
        listing.verified_before_by = actor.user_id
        listing.verified_before_at = utcnow()
        listing.verification_status = (
            VerificationStatus.COMPLETED
            if listing.verified_after_pickup
            else VerificationStatus.VERIFIED_BEFORE
        )
        return VerificationService._save_with_log(
            db, listing, actor, "verified_before_pickup", notes
        )

    @staticmethod
    def verify_after_pickup(
        db: Session, actor: AppUser, listing_id: uuid.UUID, photos: List[str], notes: Optional[str]
    ) -> FoodListing:
        listing = VerificationService._get_listing(db, listing_id)
        if listing.claimed_by is None or listing.claimed_by != actor.user_id:
            raise ForbiddenError("Only the claimer can verify after pickup")
        VerificationService._check_verifiable(listing)
        if listing.verified_after_pickup:
            raise ConflictError("Listing was already verified after pickup")

        listing.verified_after_pickup = True
        listing.verification_after_photos = list(photos)
        listing.verification_after_notes = notes
        listing.verified_after_by = actor.user_id
        listing.verified_after_at = utcnow()
        listing.verification_status = (
            VerificationStatus.COMPLETED
            if listing.verified_before_pickup
            else VerificationStatus.VERIFIED_AFTER
        )
        return VerificationService._save_with_log(
            db, listing, actor, "verified_after_pickup", notes
        )

    @staticmethod
    def skip_verification(db: Session, actor: AppUser, listing_id: uuid.UUID) -> FoodListing:
        listing = VerificationService._get_listing(db, listing_id)
        if listing.user_id != actor.user_id:
            raise ForbiddenError("Only the donor can skip verification")
        if listing.verification_status == VerificationStatus.DISPUTED:
            raise ConflictError("Disputed listings cannot skip verification")

        listing.verification_status = VerificationStatus.SKIPPED
        listing.verification_required = False
        return VerificationService._save_with_log(db, listing, actor, "verification_skipped")

    @staticmethod
    def _save_with_log(
        db: Session, listing: FoodListing, actor: AppUser, action: str, notes: str = None
    ) -> FoodListing:
        VerificationLogRepository(db).add(listing.listing_id, actor.user_id, action, notes)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(
            "Verification action=%s listing=%s actor=%s status=%s",
            action,
            listing.listing_id,
            actor.user_id,
            listing.verification_status.value,
        )
        return listing

    # ------------------------------------------------------------------
    # Disputes
    # ------------------------------------------------------------------

    @staticmethod
    def report_dispute(
        db: Session, actor: AppUser, listing_id: uuid.UUID, data: DisputeCreate
    ) -> VerificationDispute:
        listing = VerificationService._get_listing(db, listing_id)
        if not VerificationService._is_participant(listing, actor):
            raise ForbiddenError("Only the donor or claimer can report a dispute")

        dispute = VerificationDispute(
            listing_id=listing_id,
            reported_by=actor.user_id,
            dispute_type=data.dispute_type,
            description=data.description,
            evidence_photos=list(data.evidence_photos),
            status=DisputeStatus.OPEN,
        )
        db.add(dispute)
        listing.verification_status = VerificationStatus.DISPUTED
        VerificationService._save_with_log(
            db, listing, actor, "dispute_reported", data.description
        )
        db.refresh(dispute)
        return dispute

    @staticmethod
    def list_disputes(
        db: Session, listing_id: Optional[uuid.UUID] = None, status: Optional[DisputeStatus] = None
    ) -> List[VerificationDispute]:
        return DisputeRepository(db).list_disputes(listing_id=listing_id, status=status)

    @staticmethod
    def resolve_dispute(
        db: Session,
        admin: AppUser,
        dispute_id: uuid.UUID,
        status: DisputeStatus,
        resolution_notes: Optional[str] = None,
    ) -> VerificationDispute:
        if status not in (DisputeStatus.RESOLVED, DisputeStatus.DISMISSED):
            raise ServiceValidationError("Disputes can only be resolved or dismissed")

        dispute = DisputeRepository(db).get_by_id(dispute_id)
        if not dispute:
            raise NotFoundError(f"Dispute {dispute_id} not found")
        if dispute.status != DisputeStatus.OPEN:
            raise ConflictError(f"Dispute is already {dispute.status.value}")

        dispute.status = status
        dispute.resolution_notes = resolution_notes
        dispute.resolved_by = admin.user_id
        dispute.resolved_at = utcnow()
        VerificationLogRepository(db).add(
            dispute.listing_id, admin.user_id, f"dispute_{status.value}", resolution_notes
        )
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Dispute %s %s by=%s", dispute_id, status.value, admin.user_id)
        return dispute

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def get_status(db: Session, listing_id: uuid.UUID) -> FoodListing:
        return VerificationService._get_listing(db, listing_id)

    @staticmethod
    def get_logs(db: Session, listing_id: uuid.UUID) -> List[VerificationLog]:
        return VerificationLogRepository(db).list_for_listing(listing_id)

    @staticmethod
    def list_listings(
        db: Session, verification_status: Optional[VerificationStatus] = None
    ) -> List[FoodListing]:
        return ListingRepository(db).list_by_verification_status(verification_status)

    @staticmethod
    def verification_stats(db: Session) -> Dict:
        by_status = {s.value: 0 for s in VerificationStatus}
        for row in ListingRepository(db).count_by_verification_status():
            key = row["status"].value if row["status"] else VerificationStatus.PENDING.value
            by_status[key] += row["count"]
        return {"total": sum(by_status.values()), "by_status": by_status}
