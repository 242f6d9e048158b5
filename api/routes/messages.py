"""Support conversation routes and the realtime message socket"""

import asyncio
import anyio
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from api.dependencies import get_current_user, get_db, require_admin
from api.responses import ERROR_RESPONSES
from app.exceptions import DoGoodsError, UnauthorizedError
from domain.enums import ConversationStatus
from domain.models import AppUser, SessionLocal
from domain.schemas.messaging_schemas import (
    ConversationResponse,
    MessageCreate,
    MessageResponse,
)
from services.messaging_service import MessagingService
from services.realtime import hub, message_channel
from services.user_service import UserService

router = APIRouter(tags=["Messages"], responses=ERROR_RESPONSES)
logger = logging.getLogger("dogoods.api.messages")


def _conversation_response(conversation, unread_count: int = 0) -> ConversationResponse:
    return ConversationResponse.model_validate(conversation).model_copy(
        update={"unread_count": unread_count}
    )


@router.post("/conversations/me", response_model=ConversationResponse)
def get_my_conversation(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's open support conversation, created on first use"""
    return _conversation_response(MessagingService.get_or_create_conversation(db, user))


@router.get("/conversations", response_model=List[ConversationResponse])
def list_conversations(
    status: Optional[ConversationStatus] = None,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin inbox, latest activity first"""
    return [
        _conversation_response(c, unread)
        for c, unread in MessagingService.list_conversations(db, status=status)
    ]


@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageResponse])
def get_messages(
    conversation_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    messages = MessagingService.get_messages(db, conversation_id, user)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    conversation_id: UUID,
    payload: MessageCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = MessagingService.send_message(
        db, conversation_id, user, payload.content, payload.client_ref
    )
    return MessageResponse.model_validate(message).model_copy(
        update={"client_ref": payload.client_ref}
    )


@router.post("/conversations/{conversation_id}/read")
def mark_read(
    conversation_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = MessagingService.mark_read(db, conversation_id, user)
    return {"status": "ok", "updated": updated}


@router.post("/conversations/{conversation_id}/close", response_model=ConversationResponse)
def close_conversation(
    conversation_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _conversation_response(MessagingService.close_conversation(db, conversation_id, admin))


@router.post("/conversations/{conversation_id}/reopen", response_model=ConversationResponse)
def reopen_conversation(
    conversation_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _conversation_response(MessagingService.reopen_conversation(db, conversation_id, admin))


def authorize_socket(conversation_id: UUID, raw_id: Optional[str]) -> AppUser:
    """Resolve the socket caller and check they may read the conversation"""
    if not raw_id:
        raise UnauthorizedError("Missing user id")
    db = SessionLocal()
    try:
        actor = UserService.authenticate(db, UUID(raw_id))
        MessagingService.get_conversation(db, conversation_id, actor)
        return actor
    finally:
        db.close()


@router.websocket("/ws/conversations/{conversation_id}")
async def conversation_socket(
    websocket: WebSocket,
    conversation_id: UUID,
    user_id: Optional[str] = Query(None),
):
    """
    Push new messages of a conversation to the client.

    Browsers cannot set headers on a WebSocket handshake, so the caller id
    comes from the ``user_id`` query parameter (or ``X-User-Id``).
    """
    raw_id = user_id or websocket.headers.get("x-user-id")
    try:
        actor = await anyio.to_thread.run_sync(authorize_socket, conversation_id, raw_id)
    except (DoGoodsError, ValueError) as exc:
        logger.info("Rejected socket for conversation=%s: %s", conversation_id, exc)
        await websocket.close(code=1008)
        return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    channel = message_channel(conversation_id)
    # Publishers run in the sync threadpool
    token = hub.subscribe(channel, lambda payload: loop.call_soon_threadsafe(queue.put_nowait, payload))
    logger.info("Socket subscribed channel=%s user=%s", channel, actor.user_id)

    async def forward():
        while True:
            await websocket.send_json(await queue.get())

    sender = asyncio.create_task(forward())
    try:
        # Client frames are ignored; reading detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Socket push failed channel=%s user=%s", channel, actor.user_id)
        hub.unsubscribe(channel, token)
        logger.info("Socket closed channel=%s user=%s", channel, actor.user_id)
