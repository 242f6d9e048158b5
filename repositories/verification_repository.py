"""
Verification dispute and log repositories
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import VerificationDispute, VerificationLog
from domain.enums import DisputeStatus


class DisputeRepository(BaseRepository[VerificationDispute]):
    def __init__(self, db: Session):
        super().__init__(db, VerificationDispute)

    def get_by_id(self, dispute_id: UUID) -> Optional[VerificationDispute]:
        return (
            self.db.query(VerificationDispute)
            .filter(VerificationDispute.dispute_id == dispute_id)
            .first()
        )

    def list_disputes(
        self, listing_id: UUID = None, status: DisputeStatus = None
    ) -> List[VerificationDispute]:
        query = self.db.query(VerificationDispute)
        if listing_id:
            query = query.filter(VerificationDispute.listing_id == listing_id)
        if status:
            query = query.filter(VerificationDispute.status == status)
        return query.order_by(VerificationDispute.created_at.desc()).all()


class VerificationLogRepository(BaseRepository[VerificationLog]):
    def __init__(self, db: Session):
        super().__init__(db, VerificationLog)

    def add(
        self, listing_id: UUID, actor_id: Optional[UUID], action: str, notes: str = None
    ) -> VerificationLog:
        """Add a log row to the current transaction"""
        entry = VerificationLog(
            listing_id=listing_id, actor_id=actor_id, action=action, notes=notes
        )
        self.db.add(entry)
        return entry

    def list_for_listing(self, listing_id: UUID) -> List[VerificationLog]:
        return (
            self.db.query(VerificationLog)
            .filter(VerificationLog.listing_id == listing_id)
            .order_by(VerificationLog.created_at.desc())
            .all()
        )
