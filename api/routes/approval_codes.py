"""Admin routes for school approval codes"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas.community_schemas import (
    ApprovalCodeResponse,
    ApprovalCodeStats,
    GenerateCodesRequest,
    GenerateCodesResponse,
)
from services.approval_code_service import ApprovalCodeService

router = APIRouter(prefix="/approval-codes", tags=["Approval Codes"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.approval_codes")


@router.post("/generate", response_model=GenerateCodesResponse, status_code=status.HTTP_201_CREATED)
def generate_codes(
    payload: GenerateCodesRequest,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Generate a batch of signup codes for a community.

    Numbering continues from the highest existing code for the prefix:
    with LIN100001..LIN100050 issued, quantity=3 yields LIN100051..LIN100053.
    """
    codes = ApprovalCodeService.generate_codes(
        db, admin, payload.community_id, payload.school_code, payload.quantity
    )
    return GenerateCodesResponse(
        generated=len(codes), first_code=codes[0], last_code=codes[-1], codes=codes
    )


@router.get("", response_model=List[ApprovalCodeResponse])
def list_codes(
    community_id: Optional[UUID] = None,
    is_claimed: Optional[bool] = Query(None),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    codes = ApprovalCodeService.list_codes(db, community_id=community_id, is_claimed=is_claimed)
    return [ApprovalCodeResponse.model_validate(c) for c in codes]


@router.get("/stats", response_model=ApprovalCodeStats)
def code_stats(admin: AppUser = Depends(require_admin), db: Session = Depends(get_db)):
    return ApprovalCodeService.code_stats(db)


@router.get("/export", response_class=Response)
def export_unclaimed(admin: AppUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Unclaimed codes as a CSV download"""
    content = ApprovalCodeService.export_unclaimed_csv(db)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="unclaimed_approval_codes.csv"'},
    )
