from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import uuid

from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.enums import CLAIMABLE_LISTING_STATUSES, ListingStatus, ModerationDecision
from domain.models import AppUser, FoodListing
from domain.schemas.listing_schemas import FoodListingCreate, FoodListingUpdate
from repositories import CommunityRepository, ListingRepository
from services import urgency_service

logger = logging.getLogger("dogoods.listings")

# Produce is usually posted without a printed expiry date
EXPIRY_OPTIONAL_CATEGORIES = {"produce"}
LOCKED_STATUSES = (ListingStatus.CLAIMED, ListingStatus.COMPLETED)


class ListingService:
    @staticmethod
    def _check_owner_or_admin(listing: FoodListing, actor: AppUser) -> None:
        if listing.user_id != actor.user_id and not actor.is_admin:
            raise ForbiddenError("Only the donor or an admin can modify this listing")

    @staticmethod
    def create_listing(db: Session, owner: AppUser, data: FoodListingCreate) -> FoodListing:
        """
        Post a new listing.

        Listings wait in ``pending`` for moderation when moderation is
        enabled, otherwise they are immediately ``available``.
        """
        category = data.category.strip().lower()
        if data.expiry_date is None and category not in EXPIRY_OPTIONAL_CATEGORIES:
            raise ServiceValidationError("Expiry date is required for this category")

        if data.community_id:
            community = CommunityRepository(db).get_by_id(data.community_id)
            if not community:
                raise NotFoundError(f"Community {data.community_id} not found")
            if not community.is_active:
                raise ServiceValidationError(f"Community {community.name} is not active")

        status = (
            ListingStatus.PENDING
            if settings.listing_moderation_enabled
            else ListingStatus.AVAILABLE
        )
        listing = FoodListing(
            user_id=owner.user_id,
            community_id=data.community_id,
            title=data.title.strip(),
            description=data.description,
            quantity=data.quantity,
            unit=data.unit,
            category=category,
            expiry_date=data.expiry_date,
            pickup_by=data.pickup_by,
            status=status,
            donor_name=data.donor_name or owner.full_name,
            donor_email=data.donor_email or owner.email,
            donor_phone=data.donor_phone or owner.phone,
            full_address=data.full_address,
            image_url=data.image_url,
        )
        listing = ListingRepository(db).create(listing)
        logger.info(
            "Listing created id=%s owner=%s status=%s",
            listing.listing_id,
            owner.user_id,
            listing.status.value,
        )
        return listing

    @staticmethod
    def get_listing(db: Session, listing_id: uuid.UUID) -> FoodListing:
        listing = ListingRepository(db).get_by_id(listing_id)
        if not listing:
            raise NotFoundError(f"Listing {listing_id} not found")
        return listing

    @staticmethod
    def list_listings(
        db: Session,
        status: Optional[ListingStatus] = None,
        community_id: Optional[uuid.UUID] = None,
        category: Optional[str] = None,
        user_id: Optional[uuid.UUID] = None,
        sort: Optional[str] = None,
        include_expired: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> List[FoodListing]:
        """
        List listings. Without an explicit status (or owner) only claimable
        listings are returned.
        """
        statuses = None
        if status is None and user_id is None:
            statuses = list(CLAIMABLE_LISTING_STATUSES)

        listings = ListingRepository(db).list_listings(
            status=status,
            statuses=statuses,
            community_id=community_id,
            category=category.lower() if category else None,
            user_id=user_id,
            skip=skip,
            limit=limit,
        )
        if not include_expired:
            listings = urgency_service.filter_expired(listings)
        if sort == "urgency":
            listings = urgency_service.sort_by_urgency(listings)
        return listings

    @staticmethod
    def update_listing(
        db: Session, actor: AppUser, listing_id: uuid.UUID, data: FoodListingUpdate
    ) -> FoodListing:
        listing = ListingService.get_listing(db, listing_id)
        ListingService._check_owner_or_admin(listing, actor)
        if listing.status in LOCKED_STATUSES:
            raise ConflictError(f"Listing is {listing.status.value} and can no longer be edited")

        changes = data.model_dump(exclude_unset=True)
        if "category" in changes and changes["category"]:
            changes["category"] = changes["category"].strip().lower()
        for field, value in changes.items():
            setattr(listing, field, value)
        return ListingRepository(db).update(listing)

    @staticmethod
    def delete_listing(db: Session, actor: AppUser, listing_id: uuid.UUID) -> bool:
        listing = ListingService.get_listing(db, listing_id)
        ListingService._check_owner_or_admin(listing, actor)
        if listing.status == ListingStatus.CLAIMED:
            raise ConflictError("Claimed listings cannot be deleted")
        deleted = ListingRepository(db).delete(listing_id)
        logger.info("Listing deleted id=%s by=%s", listing_id, actor.user_id)
        return deleted

    @staticmethod
    def moderate_listing(
        db: Session, admin: AppUser, listing_id: uuid.UUID, decision: ModerationDecision
    ) -> FoodListing:
        listing = ListingService.get_listing(db, listing_id)
        if listing.status != ListingStatus.PENDING:
            raise ConflictError(
                f"Only pending listings can be moderated (listing is {listing.status.value})"
            )
        listing.status = (
            ListingStatus.APPROVED
            if decision == ModerationDecision.APPROVE
            else ListingStatus.DECLINED
        )
        listing = ListingRepository(db).update(listing)
        logger.info(
            "Listing moderated id=%s decision=%s by=%s",
            listing_id,
            ModerationDecision(decision).value,
            admin.user_id,
        )
        return listing
