# app/api/messages.py

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictInt
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id
from app.core.conversations import conversation_id, conversation_with, list_conversations
from app.core.errors import NotFound, PermissionDenied
from app.core.message import serialize_message, validate_new_message
from app.core.user import get_user
from app.infra.message_store import MessageStore, get_message_store
from app.infra.postgres import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages")


class SendMessageSchema(BaseModel):
    senderId: StrictInt
    recipientId: StrictInt
    sentAt: str
    body: str


@router.post("/send")
def send_message(
    payload: SendMessageSchema,
    user_id: int = Depends(get_current_user_id),
    store: MessageStore = Depends(get_message_store),
    db: Session = Depends(get_db),
):
    message = validate_new_message(payload.senderId, payload.recipientId, payload.sentAt, payload.body)

    if message.sender_id != user_id:
        raise PermissionDenied("senderMismatch")

    if get_user(db, message.recipient_id) is None:
        raise NotFound("recipientNotFound")

    message_id = store.append(message)
    logger.info("Message %s sent %s -> %s", message_id, message.sender_id, message.recipient_id)
    return {"outcome": "success", "messageId": message_id}


@router.get("/conversations")
def list_conversations_endpoint(
    user_id: int = Depends(get_current_user_id),
    store: MessageStore = Depends(get_message_store),
):
    threads = list_conversations(store, user_id)
    return {
        "outcome": "success",
        "conversations": [[serialize_message(m) for m in thread] for thread in threads],
    }


@router.get("/with/{other_id}")
def conversation_with_endpoint(
    other_id: int,
    user_id: int = Depends(get_current_user_id),
    store: MessageStore = Depends(get_message_store),
):
    thread = conversation_with(store, user_id, other_id)
    return {
        "outcome": "success",
        "conversationId": conversation_id(user_id, other_id),
        "messages": [serialize_message(m) for m in thread],
    }
