from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from app.clock import utcnow
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.enums import ConversationStatus
from domain.models import AppUser, Conversation, Message
from domain.schemas.messaging_schemas import MessageResponse
from repositories import ConversationRepository, MessageRepository
from services.realtime import hub, message_channel

logger = logging.getLogger("dogoods.messaging")

MAX_MESSAGE_LENGTH = 2000


class MessagingService:
    @staticmethod
    def _check_access(conversation: Conversation, actor: AppUser) -> None:
        if conversation.user_id != actor.user_id and not actor.is_admin:
            raise ForbiddenError("You do not have access to this conversation")

    @staticmethod
    def get_conversation(
        db: Session, conversation_id: uuid.UUID, actor: AppUser
    ) -> Conversation:
        conversation = ConversationRepository(db).get_by_id(conversation_id)
        if not conversation:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        MessagingService._check_access(conversation, actor)
        return conversation

    @staticmethod
    def get_or_create_conversation(db: Session, user: AppUser) -> Conversation:
        """The user's open support conversation, created on first use"""
        repo = ConversationRepository(db)
        conversation = repo.get_open_for_user(user.user_id)
        if conversation:
            return conversation
        conversation = repo.create(
            Conversation(user_id=user.user_id, status=ConversationStatus.OPEN)
        )
        logger.info("Conversation opened id=%s user=%s", conversation.conversation_id, user.user_id)
        return conversation

    @staticmethod
    def list_conversations(
        db: Session, status: Optional[ConversationStatus] = None
    ) -> List[Tuple[Conversation, int]]:
        """Conversations with their count of unread user messages, latest activity first"""
        message_repo = MessageRepository(db)
        return [
            (c, message_repo.unread_count(c.conversation_id, from_admin=False))
            for c in ConversationRepository(db).list_conversations(status=status)
        ]

    @staticmethod
    def get_messages(db: Session, conversation_id: uuid.UUID, actor: AppUser) -> List[Message]:
        MessagingService.get_conversation(db, conversation_id, actor)
        return MessageRepository(db).list_for_conversation(conversation_id)

    @staticmethod
    def send_message(
        db: Session,
        conversation_id: uuid.UUID,
        actor: AppUser,
        content: str,
        client_ref: Optional[str] = None,
    ) -> Message:
        """
        Store a message and push it to realtime subscribers.

        The pushed payload echoes ``client_ref`` so the sender can replace
        its optimistic copy with the stored message.
        """
        content = (content or "").strip()
        if not content:
            raise ServiceValidationError("Message content cannot be empty")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ServiceValidationError(
                f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"
            )

        conversation = MessagingService.get_conversation(db, conversation_id, actor)
        if conversation.status == ConversationStatus.CLOSED:
            raise ConflictError("Conversation is closed")

        now = utcnow()
        message = Message(
            conversation_id=conversation_id,
            sender_id=actor.user_id,
            content=content,
            is_admin=actor.is_admin and conversation.user_id != actor.user_id,
            read=False,
            created_at=now,
        )
        db.add(message)
        conversation.last_message_at = now
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(message)

        payload = MessageResponse.model_validate(message).model_copy(
            update={"client_ref": client_ref}
        )
        hub.publish(
            message_channel(conversation_id),
            {"event": "INSERT", "new": payload.model_dump(mode="json")},
        )
        logger.info(
            "Message sent conversation=%s sender=%s is_admin=%s",
            conversation_id,
            actor.user_id,
            message.is_admin,
        )
        return message

    @staticmethod
    def set_status(
        db: Session, conversation_id: uuid.UUID, admin: AppUser, status: ConversationStatus
    ) -> Conversation:
        conversation = MessagingService.get_conversation(db, conversation_id, admin)
        conversation.status = status
        return ConversationRepository(db).update(conversation)

    @staticmethod
    def close_conversation(db: Session, conversation_id: uuid.UUID, admin: AppUser) -> Conversation:
        return MessagingService.set_status(db, conversation_id, admin, ConversationStatus.CLOSED)

    @staticmethod
    def reopen_conversation(db: Session, conversation_id: uuid.UUID, admin: AppUser) -> Conversation:
        return MessagingService.set_status(db, conversation_id, admin, ConversationStatus.OPEN)

    @staticmethod
    def mark_read(db: Session, conversation_id: uuid.UUID, actor: AppUser) -> int:
        """Mark the other side's messages as read"""
        conversation = MessagingService.get_conversation(db, conversation_id, actor)
        from_admin = conversation.user_id == actor.user_id
        return MessageRepository(db).mark_read(conversation_id, from_admin=from_admin)
