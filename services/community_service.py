from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from app.exceptions import ConflictError, NotFoundError
from domain.models import Community
from domain.schemas.community_schemas import CommunityCreate, CommunityUpdate
from repositories import CommunityRepository

logger = logging.getLogger("dogoods.communities")


class CommunityService:
    @staticmethod
    def list_communities(db: Session, active_only: bool = False) -> List[Community]:
        return CommunityRepository(db).list_communities(active_only=active_only)

    @staticmethod
    def get_community(db: Session, community_id: uuid.UUID) -> Community:
        community = CommunityRepository(db).get_by_id(community_id)
        if not community:
            raise NotFoundError(f"Community {community_id} not found")
        return community

    @staticmethod
    def create_community(db: Session, data: CommunityCreate) -> Community:
        repo = CommunityRepository(db)
        if repo.get_by_name(data.name):
            raise ConflictError(f"Community '{data.name}' already exists")
        try:
            community = repo.create(Community(**data.model_dump()))
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError(f"Community '{data.name}' already exists") from exc
        logger.info("Community created id=%s name=%s", community.community_id, community.name)
        return community

    @staticmethod
    def update_community(
        db: Session, community_id: uuid.UUID, data: CommunityUpdate
    ) -> Community:
        repo = CommunityRepository(db)
        community = CommunityService.get_community(db, community_id)
        changes = data.model_dump(exclude_unset=True)

        new_name = changes.get("name")
        if new_name and new_name != community.name and repo.get_by_name(new_name):
            raise ConflictError(f"Community '{new_name}' already exists")

        for field, value in changes.items():
            setattr(community, field, value)
        return repo.update(community)

    @staticmethod
    def toggle_active(db: Session, community_id: uuid.UUID) -> Community:
        community = CommunityService.get_community(db, community_id)
        community.is_active = not community.is_active
        community = CommunityRepository(db).update(community)
        logger.info("Community %s is_active=%s", community_id, community.is_active)
        return community

    @staticmethod
    def delete_community(db: Session, community_id: uuid.UUID) -> bool:
        CommunityService.get_community(db, community_id)
        return CommunityRepository(db).delete(community_id)
