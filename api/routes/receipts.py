"""Claim and receipt lifecycle routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.enums import ReceiptStatus
from domain.mappers import ReceiptMapper
from domain.models import AppUser
from domain.schemas.receipt_schemas import (
    ClaimCreate,
    ClaimResponse,
    ClaimResultResponse,
    ExpireReceiptsResponse,
    ReceiptResponse,
    ReclaimResponse,
)
from services.job_service import JobService
from services.receipt_service import ReceiptService

router = APIRouter(tags=["Receipts"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.receipts")


@router.post("/claims", response_model=ClaimResultResponse, status_code=status.HTTP_201_CREATED)
def create_claim(
    payload: ClaimCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Claim a listing. The claim is added to the caller's pending receipt for
    the same pickup location, or a new receipt due at the next weekly
    pickup deadline.
    """
    claim, receipt = ReceiptService.create_claim(db, user, payload)
    return ClaimResultResponse(
        claim=ClaimResponse.model_validate(claim),
        receipt=ReceiptMapper.to_response(receipt),
    )


@router.get("/claims", response_model=List[ClaimResponse])
def list_my_claims(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return [ClaimResponse.model_validate(c) for c in ReceiptService.list_claims(db, user.user_id)]


@router.get("/receipts", response_model=List[ReceiptResponse])
def list_receipts(
    status: Optional[ReceiptStatus] = None,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    receipts = ReceiptService.list_receipts(db, user.user_id, status)
    return [ReceiptMapper.to_response(r) for r in receipts]


@router.get("/receipts/active", response_model=List[ReceiptResponse])
def get_active_receipts(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Pending receipts with their items, newest first."""
    return [ReceiptMapper.to_response(r) for r in ReceiptService.get_active_receipts(db, user.user_id)]


@router.post("/receipts/expire", response_model=ExpireReceiptsResponse)
def expire_receipts(admin: AppUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Admin: run receipt expiry now instead of waiting for the scheduled job."""
    logger.info("Manual receipt expiry triggered by %s", admin.user_id)
    return JobService.run_expire_receipts(db)


@router.get("/receipts/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReceiptMapper.to_response(ReceiptService.get_receipt(db, receipt_id, user))


@router.post("/receipts/{receipt_id}/pickup", response_model=ReceiptResponse)
def mark_picked_up(
    receipt_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Owner or admin: mark a pending receipt picked up."""
    receipt = ReceiptService.mark_picked_up(db, receipt_id, user)
    return ReceiptMapper.to_response(receipt)


@router.post("/receipts/{receipt_id}/reclaim", response_model=ReclaimResponse)
def reclaim_receipt(
    receipt_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Owner: turn an expired receipt into a new pending one with the items still available."""
    receipt, reclaimed, unavailable = ReceiptService.reclaim_expired(db, receipt_id, user)
    return ReclaimResponse(
        receipt=ReceiptMapper.to_response(receipt),
        reclaimed_count=reclaimed,
        unavailable_count=unavailable,
    )
