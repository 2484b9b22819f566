from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from typing import List, Optional, Dict, Any
import asyncio
import logging

from app.api.deps import get_owned_studio
from app.core.auth import get_current_user, get_user_from_token
from app.schemas.chat import (
    ConversationCreate, ConversationResponse, InboxResponse,
    MessageCreate, MessageResponse
)
from app.services.chat_service import (
    create_message, get_conversation_by_id, get_messages, get_or_create_conversation,
    get_user_conversations, is_participant, mark_messages_as_read
)
from app.services.contact_service import get_studio_contact_requests
from app.services.realtime import broker
from app.services.studio_service import get_studio_by_id, get_studio_by_owner

router = APIRouter()

logger = logging.getLogger(__name__)

async def _owned_studio_id(user: Dict[str, Any]) -> Optional[str]:
    if user.get("role") != "studio_owner":
        return None
    studio = await get_studio_by_owner(str(user["_id"]))
    return studio["id"] if studio else None

async def _get_conversation_for(conversation_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    conversation = await get_conversation_by_id(conversation_id)
    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )

    if not is_participant(conversation, user, await _owned_studio_id(user)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a participant in this conversation"
        )
    return conversation

@router.post("/conversations", response_model=ConversationResponse)
async def start_conversation(
    conversation_in: ConversationCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Open (or reopen) the chat between the current customer and a studio
    """
    studio = await get_studio_by_id(conversation_in.studioId)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )

    if studio["ownerId"] == str(current_user["_id"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot message your own studio"
        )

    return await get_or_create_conversation(str(current_user["_id"]), studio["id"])

@router.get("/conversations", response_model=List[ConversationResponse])
async def list_conversations(current_user: dict = Depends(get_current_user)):
    """
    Customers see their own chats; studio owners see their studio's chats
    """
    studio_id = await _owned_studio_id(current_user)
    if studio_id is not None:
        return await get_user_conversations(studio_id=studio_id)
    return await get_user_conversations(customer_id=str(current_user["_id"]))

@router.get("/inbox", response_model=InboxResponse)
async def get_inbox(studio: Dict[str, Any] = Depends(get_owned_studio)):
    """
    Studio inbox: chats plus inquiries sent through the contact form
    """
    return {
        "conversations": await get_user_conversations(studio_id=studio["id"]),
        "contactRequests": await get_studio_contact_requests(studio["id"]),
    }

@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: dict = Depends(get_current_user)
):
    """
    Messages of a conversation, oldest first
    """
    await _get_conversation_for(conversation_id, current_user)
    return await get_messages(conversation_id, skip, limit)

@router.post("/conversations/{conversation_id}/messages", response_model=MessageResponse)
async def send_message(
    conversation_id: str,
    message_in: MessageCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Send a message; live subscribers of the conversation receive it immediately
    """
    await _get_conversation_for(conversation_id, current_user)
    return await create_message(conversation_id, str(current_user["_id"]), message_in.content)

@router.put("/conversations/{conversation_id}/read", response_model=Dict[str, Any])
async def mark_conversation_read(
    conversation_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Mark the other side's messages as read
    """
    await _get_conversation_for(conversation_id, current_user)
    updated = await mark_messages_as_read(conversation_id, str(current_user["_id"]))
    return {"updated": updated}

@router.websocket("/ws/{conversation_id}")
async def conversation_socket(websocket: WebSocket, conversation_id: str, token: str = Query(...)):
    """
    Push new messages of one conversation while the socket stays open
    """
    user = await get_user_from_token(token)
    conversation = await get_conversation_by_id(conversation_id) if user else None
    if not user or not conversation or not is_participant(conversation, user, await _owned_studio_id(user)):
        await websocket.close(code=4403)
        return

    await websocket.accept()
    queue = broker.subscribe(conversation_id)
    sender = asyncio.ensure_future(queue.get())
    receiver = asyncio.ensure_future(websocket.receive_text())
    try:
        while True:
            done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                # Incoming frames are only keepalives; a disconnect raises here
                receiver.result()
                receiver = asyncio.ensure_future(websocket.receive_text())
            if sender in done:
                await websocket.send_json(sender.result())
                sender = asyncio.ensure_future(queue.get())
    except WebSocketDisconnect:
        logger.debug(f"Chat socket for conversation {conversation_id} closed")
    finally:
        sender.cancel()
        receiver.cancel()
        broker.unsubscribe(conversation_id, queue)
