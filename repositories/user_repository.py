"""
User Repository - Data access layer for user accounts
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import AppUser


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_id(self, user_id: UUID) -> Optional[AppUser]:
        """Get user by ID"""
        return self.db.query(AppUser).filter(AppUser.user_id == user_id).first()

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email (case-insensitive, emails are stored lower-cased)"""
        return self.db.query(AppUser).filter(AppUser.email == email.lower()).first()

    def get_by_phone(self, phone: str) -> Optional[AppUser]:
        return self.db.query(AppUser).filter(AppUser.phone == phone).first()

    def list_users(
        self, community_id: UUID = None, skip: int = 0, limit: int = 100
    ) -> List[AppUser]:
        query = self.db.query(AppUser)
        if community_id:
            query = query.filter(AppUser.community_id == community_id)
        return (
            query.order_by(AppUser.created_at.desc()).offset(skip).limit(limit).all()
        )
