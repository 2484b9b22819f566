from datetime import datetime
from typing import Dict, Any, List, Optional
import logging
from bson import ObjectId

from app.db.mongodb import db
from app.schemas.booking import BookingStatus
from app.schemas.review import ReviewCreate
from app.services.booking_service import get_booking_by_id

logger = logging.getLogger(__name__)

async def create_review(review_in: ReviewCreate, customer_id: str) -> Dict[str, Any]:
    """
    Review a completed booking. Raises LookupError if the booking does not
    exist and ValueError if it cannot be reviewed by this customer.
    """
    booking = await get_booking_by_id(review_in.bookingId)
    if not booking:
        raise LookupError(f"Booking with ID {review_in.bookingId} not found")

    if booking["customerId"] != customer_id:
        raise PermissionError("You can only review your own bookings")

    if booking["status"] != BookingStatus.COMPLETED.value:
        raise ValueError("Only completed appointments can be reviewed")

    if await db.db.reviews.find_one({"bookingId": review_in.bookingId}, {"_id": 1}):
        raise ValueError("This booking has already been reviewed")

    review_data = review_in.dict()
    review_data["studioId"] = booking["studioId"]
    review_data["customerId"] = customer_id
    review_data["createdAt"] = datetime.utcnow()

    result = await db.db.reviews.insert_one(review_data)
    review = await db.db.reviews.find_one({"_id": result.inserted_id})
    review["id"] = str(review["_id"])

    await update_studio_rating(booking["studioId"])

    return review

async def get_studio_reviews(studio_id: str) -> List[Dict[str, Any]]:
    """
    Reviews for a studio, newest first, with the reviewer's name and avatar
    """
    reviews = await db.db.reviews.find({"studioId": studio_id}).sort("createdAt", -1).to_list(None)

    customer_ids = [ObjectId(r["customerId"]) for r in reviews if ObjectId.is_valid(r.get("customerId", ""))]
    profiles = {}
    if customer_ids:
        async for user in db.db.users.find({"_id": {"$in": customer_ids}}, {"fullName": 1, "avatarUrl": 1}):
            profiles[str(user["_id"])] = user

    for r in reviews:
        r["id"] = str(r["_id"])
        profile = profiles.get(r.get("customerId"))
        r["userName"] = (profile or {}).get("fullName") or "Anonymous User"
        r["userAvatar"] = (profile or {}).get("avatarUrl")
    return reviews

async def get_review_by_id(review_id: str) -> Optional[Dict[str, Any]]:
    try:
        object_id = ObjectId(review_id)
    except Exception:
        return None
    review = await db.db.reviews.find_one({"_id": object_id})
    if review:
        review["id"] = str(review["_id"])
    return review

async def update_studio_rating(studio_id: str) -> None:
    """
    Calculate and update the average rating for a studio
    """
    pipeline = [
        {"$match": {"studioId": studio_id}},
        {"$group": {"_id": None, "avgRating": {"$avg": "$rating"}, "count": {"$sum": 1}}},
    ]
    agg = await db.db.reviews.aggregate(pipeline).to_list(length=1)

    if agg:
        count = int(agg[0].get("count", 0) or 0)
        average_rating = round(float(agg[0].get("avgRating") or 0.0), 1) if count > 0 else 0.0
    else:
        count, average_rating = 0, 0.0

    await db.db.studios.update_one(
        {"_id": ObjectId(studio_id)},
        {"$set": {"rating": average_rating, "reviewCount": count}}
    )
    logger.debug(f"Studio {studio_id} rating is now {average_rating} over {count} reviews")

async def delete_review(review_id: str) -> bool:
    """
    Delete a review by ID
    """
    review = await get_review_by_id(review_id)
    if not review:
        return False

    result = await db.db.reviews.delete_one({"_id": review["_id"]})

    await update_studio_rating(review["studioId"])

    return result.deleted_count > 0
