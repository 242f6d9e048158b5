"""
Food listing repository - data access for food listings
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import FoodListing
from domain.enums import ListingStatus, VerificationStatus


class ListingRepository(BaseRepository[FoodListing]):
    """Repository for food listing data access"""

    def __init__(self, db: Session):
        super().__init__(db, FoodListing)

    def get_by_id(self, listing_id: UUID) -> Optional[FoodListing]:
        """Get listing by ID"""
        return (
            self.db.query(FoodListing)
            .filter(FoodListing.listing_id == listing_id)
            .first()
        )

    def get_for_update(self, listing_id: UUID) -> Optional[FoodListing]:
        """Get listing with a row lock (no-op on backends without FOR UPDATE)"""
        return (
            self.db.query(FoodListing)
            .filter(FoodListing.listing_id == listing_id)
            .with_for_update()
            .first()
        )

    def get_many_for_update(self, listing_ids: List[UUID]) -> List[FoodListing]:
        if not listing_ids:
            return []
        return (
            self.db.query(FoodListing)
            .filter(FoodListing.listing_id.in_(listing_ids))
            .with_for_update()
            .all()
        )

    def list_listings(
        self,
        status: ListingStatus = None,
        statuses: List[ListingStatus] = None,
        community_id: UUID = None,
        category: str = None,
        user_id: UUID = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[FoodListing]:
        """List listings matching the given filters, newest first"""
        query = self.db.query(FoodListing)
        if status:
            query = query.filter(FoodListing.status == status)
        if statuses:
            query = query.filter(FoodListing.status.in_(statuses))
        if community_id:
            query = query.filter(FoodListing.community_id == community_id)
        if category:
            query = query.filter(FoodListing.category == category)
        if user_id:
            query = query.filter(FoodListing.user_id == user_id)
        return (
            query.order_by(FoodListing.created_at.desc()).offset(skip).limit(limit).all()
        )

    def list_by_verification_status(
        self, verification_status: VerificationStatus = None
    ) -> List[FoodListing]:
        query = self.db.query(FoodListing).filter(
            FoodListing.status.in_([ListingStatus.CLAIMED, ListingStatus.COMPLETED])
        )
        if verification_status:
            query = query.filter(FoodListing.verification_status == verification_status)
        return query.order_by(FoodListing.updated_at.desc()).all()

    def count_by_verification_status(self) -> List[dict]:
        rows = (
            self.db.query(
                FoodListing.verification_status,
                func.count(FoodListing.listing_id).label("count"),
            )
            .group_by(FoodListing.verification_status)
            .all()
        )
        return [{"status": r.verification_status, "count": r.count} for r in rows]
