"""
Conversation and message repositories
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Conversation, Message
from domain.enums import ConversationStatus


class ConversationRepository(BaseRepository[Conversation]):
    def __init__(self, db: Session):
        super().__init__(db, Conversation)

    def get_by_id(self, conversation_id: UUID) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(Conversation.conversation_id == conversation_id)
            .first()
        )

    def get_open_for_user(self, user_id: UUID) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(
                Conversation.user_id == user_id,
                Conversation.status == ConversationStatus.OPEN,
            )
            .order_by(Conversation.created_at.desc())
            .first()
        )

    def list_conversations(
        self, status: ConversationStatus = None, user_id: UUID = None
    ) -> List[Conversation]:
        query = self.db.query(Conversation)
        if status:
            query = query.filter(Conversation.status == status)
        if user_id:
            query = query.filter(Conversation.user_id == user_id)
        return query.order_by(Conversation.last_message_at.desc()).all()


class MessageRepository(BaseRepository[Message]):
    def __init__(self, db: Session):
        super().__init__(db, Message)

    def get_by_id(self, message_id: UUID) -> Optional[Message]:
        return self.db.query(Message).filter(Message.message_id == message_id).first()

    def list_for_conversation(self, conversation_id: UUID) -> List[Message]:
        return (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at, Message.message_id)
            .all()
        )

    def unread_count(self, conversation_id: UUID, from_admin: bool) -> int:
        """Unread messages sent by the admin side (or by the user side)"""
        return (
            self.db.query(func.count(Message.message_id))
            .filter(
                Message.conversation_id == conversation_id,
                Message.is_admin.is_(from_admin),
                Message.read.is_(False),
            )
            .scalar()
        )

    def mark_read(self, conversation_id: UUID, from_admin: bool) -> int:
        count = (
            self.db.query(Message)
            .filter(
                Message.conversation_id == conversation_id,
                Message.is_admin.is_(from_admin),
                Message.read.is_(False),
            )
            .update({Message.read: True}, synchronize_session=False)
        )
        self.db.commit()
        return count
