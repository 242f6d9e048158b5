"""Community (school closet) routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, require_admin
from api.responses import ERROR_RESPONSES
from domain.models import AppUser
from domain.schemas.community_schemas import (
    CommunityCreate,
    CommunityResponse,
    CommunityUpdate,
)
from services.community_service import CommunityService

router = APIRouter(prefix="/communities", tags=["Communities"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.communities")


@router.get("", response_model=List[CommunityResponse])
def list_communities(active_only: bool = Query(False), db: Session = Depends(get_db)):
    return [
        CommunityResponse.model_validate(c)
        for c in CommunityService.list_communities(db, active_only=active_only)
    ]


@router.get("/{community_id}", response_model=CommunityResponse)
def get_community(community_id: UUID, db: Session = Depends(get_db)):
    return CommunityResponse.model_validate(CommunityService.get_community(db, community_id))


@router.post("", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
def create_community(
    payload: CommunityCreate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    community = CommunityService.create_community(db, payload)
    return CommunityResponse.model_validate(community)


@router.patch("/{community_id}", response_model=CommunityResponse)
def update_community(
    community_id: UUID,
    payload: CommunityUpdate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    community = CommunityService.update_community(db, community_id, payload)
    return CommunityResponse.model_validate(community)


@router.post("/{community_id}/toggle-active", response_model=CommunityResponse)
def toggle_active(
    community_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Flip a community between active and inactive"""
    return CommunityResponse.model_validate(CommunityService.toggle_active(db, community_id))


@router.delete("/{community_id}")
def delete_community(
    community_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    CommunityService.delete_community(db, community_id)
    logger.info("Community deleted id=%s by=%s", community_id, admin.user_id)
    return {"status": "ok", "deleted": str(community_id)}
