"""Pickup verification and dispute routes"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.enums import DisputeStatus, VerificationStatus, VerificationType
from domain.mappers import ListingMapper
from domain.models import AppUser
from domain.schemas.listing_schemas import FoodListingResponse
from domain.schemas.verification_schemas import (
    DisputeCreate,
    DisputeResolve,
    DisputeResponse,
    PhotoUploadResponse,
    VerificationLogResponse,
    VerificationRequest,
    VerificationStats,
    VerificationStatusResponse,
)
from services.verification_service import VerificationService

router = APIRouter(tags=["Verification"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.verification")


@router.post(
    "/listings/{listing_id}/verification/photos",
    response_model=PhotoUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_photo(
    listing_id: UUID,
    verification_type: VerificationType = Form(...),
    file: UploadFile = File(...),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upload a before/after photo; pass the returned URL to the verify call"""
    content = file.file.read()
    path, url = VerificationService.upload_photo(
        db, user, listing_id, verification_type, file.filename or "", content
    )
    return PhotoUploadResponse(path=path, url=url)


@router.post("/listings/{listing_id}/verification/before", response_model=VerificationStatusResponse)
def verify_before_pickup(
    listing_id: UUID,
    payload: VerificationRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    listing = VerificationService.verify_before_pickup(
        db, user, listing_id, payload.photos, payload.notes
    )
    return VerificationStatusResponse.model_validate(listing)


@router.post("/listings/{listing_id}/verification/after", response_model=VerificationStatusResponse)
def verify_after_pickup(
    listing_id: UUID,
    payload: VerificationRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    listing = VerificationService.verify_after_pickup(
        db, user, listing_id, payload.photos, payload.notes
    )
    return VerificationStatusResponse.model_validate(listing)


@router.post("/listings/{listing_id}/verification/skip", response_model=VerificationStatusResponse)
def skip_verification(
    listing_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return VerificationStatusResponse.model_validate(
        VerificationService.skip_verification(db, user, listing_id)
    )


@router.get("/listings/{listing_id}/verification", response_model=VerificationStatusResponse)
def get_verification_status(listing_id: UUID, db: Session = Depends(get_db)):
    return VerificationStatusResponse.model_validate(VerificationService.get_status(db, listing_id))


@router.get(
    "/listings/{listing_id}/verification/logs", response_model=List[VerificationLogResponse]
)
def get_verification_logs(
    listing_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [VerificationLogResponse.model_validate(l) for l in VerificationService.get_logs(db, listing_id)]


@router.post(
    "/listings/{listing_id}/disputes",
    response_model=DisputeResponse,
    status_code=status.HTTP_201_CREATED,
)
def report_dispute(
    listing_id: UUID,
    payload: DisputeCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Donor or claimer: report a problem with a pickup"""
    dispute = VerificationService.report_dispute(db, user, listing_id, payload)
    return DisputeResponse.model_validate(dispute)


# Admin management


@router.get("/verification/stats", response_model=VerificationStats)
def verification_stats(admin: AppUser = Depends(require_admin), db: Session = Depends(get_db)):
    return VerificationService.verification_stats(db)


@router.get("/verification/listings", response_model=List[FoodListingResponse])
def list_listings_by_verification(
    verification_status: Optional[VerificationStatus] = None,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    listings = VerificationService.list_listings(db, verification_status)
    return [ListingMapper.to_response(l) for l in listings]


@router.get("/verification/disputes", response_model=List[DisputeResponse])
def list_disputes(
    listing_id: Optional[UUID] = None,
    status: Optional[DisputeStatus] = None,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    disputes = VerificationService.list_disputes(db, listing_id=listing_id, status=status)
    return [DisputeResponse.model_validate(d) for d in disputes]


@router.post("/verification/disputes/{dispute_id}/resolve", response_model=DisputeResponse)
def resolve_dispute(
    dispute_id: UUID,
    payload: DisputeResolve,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin: resolve or dismiss an open dispute"""
    dispute = VerificationService.resolve_dispute(
        db, admin, dispute_id, payload.status, payload.resolution_notes
    )
    return DisputeResponse.model_validate(dispute)
