from typing import Dict, Any, List
from app.db.mongodb import db
from app.schemas.chat import ContactRequestCreate
from datetime import datetime
from bson import ObjectId

async def create_contact_request(request_in: ContactRequestCreate) -> Dict[str, Any]:
    """
    Store an inquiry sent from a studio's public page
    """
    request_data = request_in.dict()
    request_data["email"] = str(request_in.email)
    request_data["createdAt"] = datetime.utcnow()
    request_data["isRead"] = False

    result = await db.db.contact_requests.insert_one(request_data)
    created = await db.db.contact_requests.find_one({"_id": result.inserted_id})
    created["id"] = str(created["_id"])
    return created

async def get_studio_contact_requests(studio_id: str, limit: int = 100) -> List[Dict[str, Any]]:
    """
    Inquiries for a studio, newest first
    """
    cursor = db.db.contact_requests.find({"studioId": studio_id}).sort("createdAt", -1)
    requests = await cursor.to_list(length=limit)
    for request in requests:
        request["id"] = str(request["_id"])
    return requests

async def mark_contact_request_read(request_id: str, studio_id: str) -> bool:
    try:
        object_id = ObjectId(request_id)
    except Exception:
        return False
    result = await db.db.contact_requests.update_one(
        {"_id": object_id, "studioId": studio_id},
        {"$set": {"isRead": True}}
    )
    return result.matched_count > 0
