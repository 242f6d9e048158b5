"""Food listing routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import Literal, Optional

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.enums import ListingStatus
from domain.mappers import ListingMapper
from domain.models import AppUser
from domain.schemas.listing_schemas import (
    FoodListingCreate,
    FoodListingListResponse,
    FoodListingResponse,
    FoodListingUpdate,
    ModerationRequest,
)
from services.listing_service import ListingService

router = APIRouter(prefix="/listings", tags=["Listings"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.listings")


@router.post("", response_model=FoodListingResponse, status_code=status.HTTP_201_CREATED)
def create_listing(
    payload: FoodListingCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Post surplus food. New listings wait for admin approval when moderation is on."""
    listing = ListingService.create_listing(db, user, payload)
    return ListingMapper.to_response(listing)


@router.get("", response_model=FoodListingListResponse)
def list_listings(
    status: Optional[ListingStatus] = Query(None, description="Defaults to claimable listings"),
    community_id: Optional[UUID] = None,
    category: Optional[str] = None,
    user_id: Optional[UUID] = Query(None, description="Only listings posted by this donor"),
    sort: Optional[Literal["newest", "urgency"]] = Query(None),
    include_expired: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """
    Browse listings.

    Examples:
    - GET /listings?sort=urgency - claimable food, most urgent first
    - GET /listings?community_id={id}&category=produce
    - GET /listings?status=pending - moderation queue
    """
    listings = ListingService.list_listings(
        db,
        status=status,
        community_id=community_id,
        category=category,
        user_id=user_id,
        sort=sort,
        include_expired=include_expired,
        skip=skip,
        limit=limit,
    )
    return FoodListingListResponse(
        listings=[ListingMapper.to_response(l) for l in listings], total=len(listings)
    )


@router.get("/{listing_id}", response_model=FoodListingResponse)
def get_listing(listing_id: UUID, db: Session = Depends(get_db)):
    return ListingMapper.to_response(ListingService.get_listing(db, listing_id))


@router.patch("/{listing_id}", response_model=FoodListingResponse)
def update_listing(
    listing_id: UUID,
    payload: FoodListingUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Donor or admin: edit a listing that has not been claimed yet."""
    listing = ListingService.update_listing(db, user, listing_id, payload)
    return ListingMapper.to_response(listing)


@router.delete("/{listing_id}")
def delete_listing(
    listing_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ListingService.delete_listing(db, user, listing_id)
    return {"status": "ok", "deleted": str(listing_id)}


@router.post("/{listing_id}/moderate", response_model=FoodListingResponse)
def moderate_listing(
    listing_id: UUID,
    payload: ModerationRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: approve or decline a pending listing."""
    listing = ListingService.moderate_listing(db, admin, listing_id, payload.decision)
    return ListingMapper.to_response(listing)
