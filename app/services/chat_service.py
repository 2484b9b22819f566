from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.services.realtime import broker
from datetime import datetime
from bson import ObjectId
import logging

logger = logging.getLogger(__name__)

def _prepare(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    document["id"] = str(document["_id"])
    return document

def message_event(message: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-safe form of a message for realtime subscribers."""
    return {
        "id": message["id"],
        "conversationId": message["conversationId"],
        "senderId": message["senderId"],
        "content": message["content"],
        "createdAt": message["createdAt"].isoformat(),
        "isRead": message.get("isRead", False),
    }

async def get_or_create_conversation(customer_id: str, studio_id: str) -> Dict[str, Any]:
    """
    Return the conversation between a customer and a studio, starting one if needed
    """
    existing = await db.db.conversations.find_one({"customerId": customer_id, "studioId": studio_id})
    if existing:
        return _prepare(existing)

    now = datetime.utcnow()
    result = await db.db.conversations.insert_one({
        "customerId": customer_id,
        "studioId": studio_id,
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Conversation started between customer {customer_id} and studio {studio_id}")
    return _prepare(await db.db.conversations.find_one({"_id": result.inserted_id}))

async def get_conversation_by_id(conversation_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a conversation by ID
    """
    try:
        object_id = ObjectId(conversation_id)
    except Exception:
        return None
    return _prepare(await db.db.conversations.find_one({"_id": object_id}))

def is_participant(conversation: Dict[str, Any], user: Dict[str, Any], owned_studio_id: Optional[str]) -> bool:
    """The customer of a conversation and the owner of its studio may take part."""
    return conversation["customerId"] == str(user["_id"]) or (
        owned_studio_id is not None and conversation["studioId"] == owned_studio_id
    )

async def get_user_conversations(
    customer_id: Optional[str] = None, studio_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Conversations of a customer or of a studio, most recently active first,
    with the studio and customer details the inbox shows
    """
    query: Dict[str, Any] = {}
    if customer_id is not None:
        query["customerId"] = customer_id
    if studio_id is not None:
        query["studioId"] = studio_id
    if not query:
        return []

    viewer_id = customer_id
    cursor = db.db.conversations.find(query).sort("updatedAt", -1)
    conversations = [_prepare(c) for c in await cursor.to_list(length=100)]

    for conversation in conversations:
        studio = await db.db.studios.find_one(
            {"_id": ObjectId(conversation["studioId"])}, {"name": 1, "coverImage": 1}
        ) if ObjectId.is_valid(conversation["studioId"]) else None
        customer = await db.db.users.find_one(
            {"_id": ObjectId(conversation["customerId"])}, {"fullName": 1, "avatarUrl": 1}
        ) if ObjectId.is_valid(conversation["customerId"]) else None

        conversation["studio"] = {
            "name": (studio or {}).get("name") or "Studio",
            "coverImage": (studio or {}).get("coverImage"),
        }
        conversation["customer"] = {
            "fullName": (customer or {}).get("fullName") or "Customer",
            "avatarUrl": (customer or {}).get("avatarUrl"),
        }

        # Unread means sent by the other side
        sender_filter = {"$ne": viewer_id} if viewer_id else conversation["customerId"]
        conversation["unreadCount"] = await db.db.messages.count_documents({
            "conversationId": conversation["id"],
            "isRead": False,
            "senderId": sender_filter,
        })

    return conversations

async def get_messages(conversation_id: str, skip: int = 0, limit: int = 100) -> List[Dict[str, Any]]:
    """
    Messages of a conversation, oldest first
    """
    cursor = db.db.messages.find({"conversationId": conversation_id}).sort("createdAt", 1).skip(skip).limit(limit)
    messages = await cursor.to_list(length=limit)
    return [_prepare(m) for m in messages]

async def create_message(conversation_id: str, sender_id: str, content: str) -> Dict[str, Any]:
    """
    Store a message, bump the conversation and push it to live subscribers
    """
    now = datetime.utcnow()
    result = await db.db.messages.insert_one({
        "conversationId": conversation_id,
        "senderId": sender_id,
        "content": content,
        "createdAt": now,
        "isRead": False,
    })

    await db.db.conversations.update_one(
        {"_id": ObjectId(conversation_id)},
        {"$set": {"updatedAt": now}}
    )

    message = _prepare(await db.db.messages.find_one({"_id": result.inserted_id}))
    broker.publish(conversation_id, message_event(message))
    return message

async def mark_messages_as_read(conversation_id: str, reader_id: str) -> int:
    """
    Mark everything the other side sent in a conversation as read
    """
    result = await db.db.messages.update_many(
        {"conversationId": conversation_id, "senderId": {"$ne": reader_id}, "isRead": False},
        {"$set": {"isRead": True}}
    )
    return result.modified_count
