"""
Community and approval code repositories
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Community, ApprovalCode


class CommunityRepository(BaseRepository[Community]):
    """Repository for community data access"""

    def __init__(self, db: Session):
        super().__init__(db, Community)

    def get_by_id(self, community_id: UUID) -> Optional[Community]:
        return (
            self.db.query(Community)
            .filter(Community.community_id == community_id)
            .first()
        )

    def get_by_name(self, name: str) -> Optional[Community]:
        return self.db.query(Community).filter(Community.name == name).first()

    def list_communities(self, active_only: bool = False) -> List[Community]:
        query = self.db.query(Community)
        if active_only:
            query = query.filter(Community.is_active.is_(True))
        return query.order_by(Community.name).all()


class ApprovalCodeRepository(BaseRepository[ApprovalCode]):
    """Repository for signup approval codes"""

    def __init__(self, db: Session):
        super().__init__(db, ApprovalCode)

    def get_by_id(self, code: str) -> Optional[ApprovalCode]:
        return self.db.query(ApprovalCode).filter(ApprovalCode.code == code).first()

    def get_for_update(self, code: str) -> Optional[ApprovalCode]:
        """Lock the code row while it is being redeemed"""
        return (
            self.db.query(ApprovalCode)
            .filter(ApprovalCode.code == code)
            .with_for_update()
            .first()
        )

    def get_codes_for_prefix(self, school_code: str) -> List[str]:
        rows = (
            self.db.query(ApprovalCode.code)
            .filter(ApprovalCode.school_code == school_code)
            .all()
        )
        return [r.code for r in rows]

    def list_codes(
        self, community_id: UUID = None, is_claimed: bool = None
    ) -> List[ApprovalCode]:
        query = self.db.query(ApprovalCode)
        if community_id:
            query = query.filter(ApprovalCode.community_id == community_id)
        if is_claimed is not None:
            query = query.filter(ApprovalCode.is_claimed.is_(is_claimed))
        return query.order_by(ApprovalCode.created_at.desc(), ApprovalCode.code).all()

    def list_unclaimed_with_community(self) -> List[ApprovalCode]:
        return (
            self.db.query(ApprovalCode)
            .options(joinedload(ApprovalCode.community))
            .filter(ApprovalCode.is_claimed.is_(False))
            .order_by(ApprovalCode.school_code, ApprovalCode.code)
            .all()
        )

    def bulk_insert(self, codes: List[ApprovalCode]) -> None:
        """Add a batch of codes to the current transaction"""
        self.db.add_all(codes)
        self.db.flush()

    def count_by_school(self) -> List[dict]:
        rows = (
            self.db.query(
                ApprovalCode.school_code,
                ApprovalCode.is_claimed,
                func.count(ApprovalCode.code).label("count"),
            )
            .group_by(ApprovalCode.school_code, ApprovalCode.is_claimed)
            .all()
        )
        return [
            {"school_code": r.school_code, "is_claimed": bool(r.is_claimed), "count": r.count}
            for r in rows
        ]
